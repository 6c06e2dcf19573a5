import json, os, sys, tempfile

# Ensure the project root is in path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tests.helpers import make_constants

# The service reads its configuration from the environment at import time,
# so the default constants file has to exist before bene_service is imported.
_CONFIG_DIR = tempfile.mkdtemp(prefix="bene-config-")
CONSTANTS_PATH = os.path.join(_CONFIG_DIR, "constants.json")

with open(CONSTANTS_PATH, "w", encoding="utf-8") as f:
    json.dump(make_constants().to_dict(), f)

os.environ["BENE_CONSTANTS_PATH"] = CONSTANTS_PATH
os.environ["BENE_CONTRACT_VERSION"] = "v1_2"
os.environ["BENE_ENV"] = "test"
