"""Start the address book UI: ``streamlit run main.py``."""
import sys
from pathlib import Path

# Lets the app run from a checkout without `pip install -e .`.
SRC_PATH = Path(__file__).resolve().parent / "src"
if SRC_PATH.is_dir() and str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from addressbook.streamlit_app.app import main  # noqa: E402

if __name__ == "__main__":
    main()
