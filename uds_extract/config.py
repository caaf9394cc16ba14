from pathlib import Path

LOG_DIR = Path(__file__).parent / "logs"
LOG_FILE = LOG_DIR / "session.jsonl"
APP_NAME = "UDS Extract"

# имя файла образа по умолчанию (кладётся рядом с трассой)
DEFAULT_OUT_NAME = "outputFile.bin"
