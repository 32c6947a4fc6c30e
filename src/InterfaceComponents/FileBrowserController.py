"""Script browser for the translator UI."""

from pathlib import Path
from typing import NamedTuple

from textual.widgets import Tree
from textual.widgets.tree import TreeNode


class ScriptSelection(NamedTuple):
    """Outcome of selecting a tree node: the script text and name, or an error."""

    content: str | None = None
    script_name: str | None = None
    error: str | None = None


class FileBrowserController:
    """Fills a Tree with the .js scripts found below `project_root`.

    Directories that hold no script at any depth are left out.
    """

    SKIPPED_DIRS = frozenset({
        "src", "outputs", "tests", "scripts", "__pycache__",
        "node_modules", "dist", "build",
    })
    SCRIPT_SUFFIX = ".js"

    def __init__(self, tree_widget: Tree, project_root: Path):
        self.tree = tree_widget
        self.project_root = project_root

    def _skipped(self, path: Path) -> bool:
        return (
            path.name.startswith(".")
            or path.name in self.SKIPPED_DIRS
            or path.name.endswith(".egg-info")
        )

    def _is_script(self, path: Path) -> bool:
        return path.is_file() and path.suffix.lower() == self.SCRIPT_SUFFIX

    def refresh(self) -> int:
        """Rebuild the tree and return how many scripts it lists."""
        self.tree.clear()
        root = self.tree.root
        root.set_label(self.project_root.name or str(self.project_root))
        root.data = self.project_root
        found = self._fill(root, self.project_root)
        root.expand()
        return found

    def _fill(self, node: TreeNode, directory: Path) -> int:
        try:
            entries = sorted(directory.iterdir(), key=lambda p: (p.is_file(), p.name.lower()))
        except OSError:
            return 0

        found = 0
        for entry in entries:
            if entry.is_dir():
                if self._skipped(entry):
                    continue
                child = node.add(entry.name, data=entry)
                below = self._fill(child, entry)
                if below:
                    found += below
                else:
                    child.remove()
            elif self._is_script(entry):
                node.add_leaf(entry.name, data=entry)
                found += 1
        return found

    def open(self, node: TreeNode) -> ScriptSelection:
        """Toggle a directory node or read the script behind a leaf."""
        path = node.data
        if not isinstance(path, Path):
            return ScriptSelection()
        if path.is_dir():
            node.toggle()
            return ScriptSelection()
        if not self._is_script(path):
            return ScriptSelection(error=f"{path.name} is not a JavaScript file.")
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return ScriptSelection(error=f"Cannot read {path.name}: {e}")
        return ScriptSelection(content, path.stem)
