from logging.config import dictConfig

from flask import Flask


def configure_logging(app: Flask) -> None:
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "[%(asctime)s] %(levelname)s in %(name)s: %(message)s",
                }
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://flask.logging.wsgi_errors_stream",
                    "formatter": "default",
                }
            },
            "loggers": {
                "sqlalchemy.engine": {"level": app.config["SQL_LOG_LEVEL"]},
            },
            "root": {"level": app.config["LOG_LEVEL"], "handlers": ["console"]},
        }
    )
