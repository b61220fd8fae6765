from taskhub.cli.main import app

app()
