"""WSGI entry point for the health endpoints."""
from mercosur_trade.web import create_app

app = create_app()

if __name__ == "__main__":
    app.run()
