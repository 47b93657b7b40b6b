from hrcmd.main import run

run()
