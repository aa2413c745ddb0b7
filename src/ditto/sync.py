""" Synchronization primitives used by the client: a reader/writer lock
    for the handler registry, and a barrier that lets message dispatch wait
    for any in-flight connect notification.
"""

import contextlib
import threading


class ReadWriteLock:
    """ Any number of readers may hold the lock at once; a writer holds it
        exclusively. Waiting writers take precedence over new readers.
    """

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0


    def acquire_read(self):
        with self._condition:
            while self._writer or self._writers_waiting:
                self._condition.wait()
            self._readers += 1


    def release_read(self):
        with self._condition:
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()


    def acquire_write(self):
        with self._condition:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._condition.wait()
            self._writers_waiting -= 1
            self._writer = True


    def release_write(self):
        with self._condition:
            self._writer = False
            self._condition.notify_all()


    @contextlib.contextmanager
    def read(self):
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()


    @contextlib.contextmanager
    def write(self):
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


# end of class ReadWriteLock



class InFlight:
    """ Count outstanding operations; :func:`wait` blocks until the count
        returns to zero. Waiting with no outstanding operations returns
        immediately.
    """

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._count = 0


    def add(self, count=1):
        with self._condition:
            self._count += count
            if self._count < 0:
                raise ValueError('negative in-flight count')
            if self._count == 0:
                self._condition.notify_all()


    def done(self):
        self.add(-1)


    def wait(self, timeout=None):
        """ Return True if the count reached zero, False if the *timeout*
            expired first.
        """

        with self._condition:
            return self._condition.wait_for(lambda: self._count == 0, timeout)


# end of class InFlight


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
