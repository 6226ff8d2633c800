import logging
import time
from contextlib import contextmanager


@contextmanager
def timed(logger: logging.Logger, label: str):
	start = time.perf_counter()
	elapsed = lambda: int((time.perf_counter() - start) * 1000)
	try:
		yield elapsed
	finally:
		logger.info("%s took %dms", label, elapsed())
