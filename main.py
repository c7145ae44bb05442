# Avvio locale: python main.py  (oppure: uvicorn main:app --port 5000)
from prompt_api.main import app, run  # noqa: F401

if __name__ == "__main__":
    run()
