# PlatformIO pre-script: regenerates src/OtaHTML.h before compiling.
#
#   [env:esp32]
#   extra_scripts = pre:frontend/build_ota_html.py
import os
import sys

Import("env")

env.Execute("$PYTHONEXE -m pip install minify_html")

project_dir = env.subst("$PROJECT_DIR")
frontend_dir = os.path.join(project_dir, "frontend")
spark_md5 = os.path.join(frontend_dir, "node_modules", "spark-md5", "spark-md5.min.js")

# spark-md5 comes from frontend/package.json.
if not os.path.exists(spark_md5):
    env.Execute("npm install --prefix " + frontend_dir)

sys.path.insert(0, project_dir)

from ota_html.pipeline import build  # noqa: E402


def pre_build_ota_html(source, target, env):
    build(
        html_path=os.path.join(frontend_dir, "index.html"),
        script_path=spark_md5,
        output_path=os.path.join(env.subst("$PROJECT_SRC_DIR"), "OtaHTML.h"),
    )


pre_build_ota_html(None, None, env)
