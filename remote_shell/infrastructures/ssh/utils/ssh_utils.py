import asyncio
import functools


async def run_in_executor(func, *args, **kwargs):
    loop = asyncio.get_running_loop()
    partial_func = functools.partial(func, *args, **kwargs)
    return await loop.run_in_executor(None, partial_func)


def decode_output(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")
