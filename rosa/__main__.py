from rosa.cli.commands import app

app()
