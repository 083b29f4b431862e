# gunicorn.conf.py
import multiprocessing
import os

# app factory (package installed, or PYTHONPATH=src)
wsgi_app = "campreg.main:create_app"
factory = True

# networking
bind = f"{os.getenv('HOST', '0.0.0.0')}:{int(os.getenv('PORT', '8000'))}"

# workers
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"
preload_app = True

# timeouts
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
graceful_timeout = int(os.getenv("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("GUNICORN_KEEPALIVE", "5"))

# recycle workers now and then
max_requests = int(os.getenv("GUNICORN_MAX_REQUESTS", "1000"))
max_requests_jitter = int(os.getenv("GUNICORN_MAX_REQUESTS_JITTER", "100"))

# logging: same JSON shape as campreg.main, for master and workers
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
capture_output = True

_LEVEL = loglevel.upper()
_console = {"level": _LEVEL, "handlers": ["console"], "propagate": False}

logconfig_dict = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "json": {
            "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
            "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s %(process)d %(thread)d %(module)s",
        }
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        }
    },
    "root": {"level": _LEVEL, "handlers": ["console"]},
    "loggers": {
        "campreg":          _console,
        "gunicorn.error":   _console,
        "gunicorn.access":  _console,
        "uvicorn.error":    _console,
        "uvicorn.access":   _console,
    },
}
