"""Home and help routes."""

from flask import Flask, render_template

from ..engine.topology import ACT_NAMES


def register_routes(app: Flask) -> None:
    """Register home routes."""

    @app.get("/")
    def home():
        return render_template("home.html", acts=ACT_NAMES)

    @app.get("/help")
    def help_page():
        return render_template("help.html")
