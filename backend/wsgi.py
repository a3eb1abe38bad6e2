# backend/wsgi.py
from ebucks import create_app

app = create_app()
