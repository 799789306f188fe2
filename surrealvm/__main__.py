from surrealvm.surrealvm import cli

cli()
