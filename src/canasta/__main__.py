import uvicorn

from canasta.config import load_settings


def main():
    settings = load_settings()
    print(f"Serving Canasta on http://{settings.host}:{settings.port} (database: {settings.database_url})")
    uvicorn.run("canasta.api.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
