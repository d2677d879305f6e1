import asyncio


async def skip_loop(iterations=1):
    for _ in range(iterations):
        await asyncio.sleep(0)


async def async_return_value(return_value, loop_iterations_delay=0):
    if loop_iterations_delay > 0:
        await skip_loop(loop_iterations_delay)
    return return_value


async def async_raise(error, loop_iterations_delay=0):
    if loop_iterations_delay > 0:
        await skip_loop(loop_iterations_delay)
    raise error


class ScriptedStream:
    """
    Read-into stream replaying a script.

    Every read takes the next script entry: bytes are delivered (split when larger
    than the read region), ``None`` reports that nothing is available right now and
    an exception instance is raised. Once the script runs out reads return 0.
    """
    def __init__(self, script=()):
        self._script = list(script)
        self.reads = 0
        self.closed = False

    def append(self, *entries):
        self._script.extend(entries)

    def readinto(self, region):
        self.reads += 1
        if not self._script:
            return 0
        entry = self._script.pop(0)
        if entry is None:
            return None
        if isinstance(entry, BaseException):
            raise entry
        count = min(len(entry), len(region))
        region[:count] = entry[:count]
        if count < len(entry):
            self._script.insert(0, entry[count:])
        return count

    def close(self):
        self.closed = True
