from pathlib import Path

from ota_html.minifier import MinifyOptions

PROJECT_DIR = Path(__file__).resolve().parent.parent
FRONTEND_DIR = PROJECT_DIR / "frontend"

HTML_PATH = FRONTEND_DIR / "index.html"
# Installed by `npm install` in frontend/ (see frontend/package.json).
SCRIPT_PATH = FRONTEND_DIR / "node_modules" / "spark-md5" / "spark-md5.min.js"
OUTPUT_PATH = PROJECT_DIR / "src" / "OtaHTML.h"

DEFAULT_OPTIONS = MinifyOptions()
