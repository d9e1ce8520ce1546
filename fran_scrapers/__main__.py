from fran_scrapers.cli import app

app(prog_name="fran")
