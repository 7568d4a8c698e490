"""Memo storage — one plain file per note plus two JSON sidecars.

Layout of a memo directory:
    <memoDirectory>/
    ├── 買い物リスト.md        # one note per file (.md or .txt)
    ├── todo.txt
    ├── .pins.json            # filename → {pinned, pinnedAt}
    └── .order.json           # filename → integer rank

The filename is the only key shared by the three sources. All renames go
through `MemoStore.save_memo()` so the sidecars follow the file.
"""
