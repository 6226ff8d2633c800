import base64

# Multiple of 3 so every chunk encodes without padding except the last one
CHUNK_SIZE = 3 * 1024 * 256


def to_base64(data: bytes, chunk_size: int = CHUNK_SIZE) -> str:
	if chunk_size <= 0 or chunk_size % 3:
		raise ValueError("chunk_size must be a positive multiple of 3")
	view = memoryview(data or b"")
	parts = [base64.b64encode(view[i:i + chunk_size]).decode("ascii") for i in range(0, len(view), chunk_size)]
	return "".join(parts)
