#common/database_connection.py

import os

import psycopg2
from dotenv import load_dotenv

from common.config import get_settings
from common.logging_factory import LoggerFactory

# 🟩 Carica le variabili dal .env globale del progetto
dotenv_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', '.env'))
load_dotenv(dotenv_path)

logger = LoggerFactory.get_logger("database")


def connetti_db():
    settings = get_settings()
    try:
        conn = psycopg2.connect(
            dbname=settings.DB_NAME,
            user=settings.DB_USER,
            password=settings.DB_PASS,
            host=settings.DB_HOST,
            port=settings.DB_PORT,
        )
    except psycopg2.Error as e:
        logger.error(f"❌ Errore di connessione al database: {e}")
        raise
    logger.debug("✅ Connessione al database stabilita.")
    return conn


def chiudi_connessione(conn):
    if conn:
        conn.close()


def get_db_connection():
    """Dipendenza FastAPI: una connessione per richiesta, chiusa sempre alla fine."""
    conn = connetti_db()
    try:
        yield conn
    finally:
        chiudi_connessione(conn)
