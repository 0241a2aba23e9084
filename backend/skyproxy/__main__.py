import uvicorn

from skyproxy.config import settings


def main():
    uvicorn.run("skyproxy.main:app", host="0.0.0.0", port=settings.port, log_level="info")


if __name__ == "__main__":
    main()
