from smart_toilets.main import run

run()
