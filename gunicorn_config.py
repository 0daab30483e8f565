"""
Gunicorn configuration for the CONAND site
"""
import multiprocessing
import os

# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', '3000')}"
backlog = 2048

# Worker processes
# Pages wait on the content file and the contact form on Mailjet/reCAPTCHA,
# so async workers (gevent) with CPU cores + 1 processes
workers = multiprocessing.cpu_count() + 1
worker_class = 'gevent'
worker_connections = 1000  # Max concurrent connections per worker
# Above the outbound timeout used for reCAPTCHA + Mailjet
timeout = 60
keepalive = 5

# Logging
accesslog = '-'  # Log to stdout
errorlog = '-'   # Log to stderr
loglevel = os.environ.get('LOG_LEVEL', 'info').lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = 'conand'

# Server mechanics
daemon = False
pidfile = None
umask = 0
user = None
group = None
tmp_upload_dir = None

# TLS is terminated by nginx
keyfile = None
certfile = None
