"""Minimal hello-world demo for deltadoc against a running MongoDB.

Set DELTADOC__DELTADOC__MONGO_URI and DELTADOC__DELTADOC__DATABASE (or put
them in a .env file) before running.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running directly from the repo without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from deltadoc.core.deltadoc import DeltaDoc  # noqa: E402
from deltadoc.core.mystique import capability  # noqa: E402


@capability("hello_posts")
class Taggable:
    """Record operations for posts."""

    def tag(self, label):
        return self.delta("$addToSet", {"tags": label})


@capability("hello_posts", kind="collection")
class Recent:
    """Collection operations for posts."""

    def recent(self, limit=5):
        return self.find(sort=[("_id", -1)], limit=limit)


def main() -> int:
    deltadoc = DeltaDoc.create()
    if deltadoc.collection_fetcher is None:
        print("[hello] set DELTADOC__DELTADOC__MONGO_URI and DELTADOC__DELTADOC__DATABASE first")
        return 1

    deltadoc.mystique.register_capability(Taggable)
    deltadoc.mystique.register_capability(Recent)

    posts = deltadoc.collection("hello_posts")
    print(f"[hello] {posts!r}")

    post = posts.insert({"title": "hi", "published": False})
    print(f"[hello] inserted {post['_id']}")

    post.title = "bye"
    post.tag("demo")
    print(f"[hello] pending deltas = {post.deltas}")

    result = post.update({"$set": {"published": True}})
    print(f"[hello] matched={result.matched_count} modified={result.modified_count}")

    stored = posts.find_by_id(str(post["_id"]))
    print(f"[hello] stored = {stored.to_dict()}")

    for record in posts.recent().lazy():
        print(f"[hello] recent: {record.get('title')!r}")

    stored.delete()
    deltadoc.collection_fetcher.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
