from peerfinder.commands import run

run()
