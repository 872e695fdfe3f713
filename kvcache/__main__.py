# kvcache/__main__.py
# python -m kvcache
from kvcache.main import run

run()
