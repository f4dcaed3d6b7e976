from fmchain.cli import cli

cli()
