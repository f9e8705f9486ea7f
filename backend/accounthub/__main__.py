# accounthub/__main__.py
import uvicorn

from accounthub.config import settings


def main():
    uvicorn.run("accounthub.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
