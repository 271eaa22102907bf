import logging
import subprocess
import sys
import os
from pathlib import Path

def main():
    project_root = Path(__file__).parent.parent
    os.chdir(project_root)

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    sys.path.insert(0, src_path)
    from fee_tool.config.settings import get_settings

    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger = logging.getLogger("run_api")

    logger.info("Starting Fee Tool API (FastAPI) on %s:%s", settings.api_host, settings.api_port)
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "fee_tool.api.main:app",
            "--host", settings.api_host,
            "--port", str(settings.api_port),
            "--log-level", settings.log_level.lower(),
            "--reload"
        ], env=env)
    except KeyboardInterrupt:
        logger.info("API stopped.")

if __name__ == "__main__":
    main()
