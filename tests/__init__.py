import pathlib
import sys

try:
    import blnverify  # noqa: F401
except ImportError:
    # Make 'blnverify' importable from a source checkout without installing it
    src_path = pathlib.Path(__file__).resolve().parent.parent / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))
