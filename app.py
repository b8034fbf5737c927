from src.time_accounting.time_accounting.main import create_app

app = create_app()


if __name__ == "__main__":
    # The reloader would start a second copy of the background scheduler
    app.run(debug=app.config["DEBUG"], use_reloader=False)
