import multiprocessing
import os

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS") or max(2, multiprocessing.cpu_count() * 2))
threads = 2
worker_class = "gthread"
# uploads de NF (até 10 MB)
timeout = 120
keepalive = 30
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNICORN_LOGLEVEL", "info")
forwarded_allow_ips = "*"
wsgi_app = "config.wsgi:application"
