# gunicorn.conf.py
"""
Gunicorn configuration for the Farm Ledger API.

    gunicorn farmledger.wsgi:application -c gunicorn.conf.py

Worker count and bind address can be overridden with GUNICORN_WORKERS and
GUNICORN_BIND.
"""
import multiprocessing
import os

# Server socket
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')
backlog = 2048

# Worker processes
workers = int(os.environ.get('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = 'sync'
timeout = 60
keepalive = 5
max_requests = 1000
max_requests_jitter = 50

preload_app = True

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.environ.get('GUNICORN_LOG_LEVEL', 'info')
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = 'farmledger-gunicorn'

graceful_timeout = 30

# TLS terminates at the proxy
forwarded_allow_ips = '*'
secure_scheme_headers = {
    'X-FORWARDED-PROTO': 'https',
}
