# Import built-in modules
from pathlib import Path


PACKAGE_NAME = "github_ssh_wizard"
THIS_ROOT = Path(__file__).parent.parent
