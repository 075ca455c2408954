from hourglass.cli import app

app()
