# passenger_wsgi.py
import os
import sys

import pymysql

pymysql.install_as_MySQLdb()

BASE_DIR = os.path.dirname(__file__)
if BASE_DIR not in sys.path:
    sys.path.insert(0, BASE_DIR)

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "pcshop.settings")
from pcshop.wsgi import application  # noqa: E402,F401
