""" Normalization of action handler results. A handler may return a plain
    value, raise, return a future (:class:`concurrent.futures.Future` or an
    :mod:`asyncio` future), or return a coroutine; :func:`invoke` turns all
    of these into a single :class:`concurrent.futures.Future`, so that the
    reply path in :class:`xchannel.Channel` is one done-callback with a
    success branch and a failure branch.
"""

import asyncio
import concurrent.futures
import inspect


def invoke(function, *args):
    """ Call *function* with *args* and return a
        :class:`concurrent.futures.Future` representing its outcome. The
        returned future is already complete unless the function returned
        a deferred value of its own.

        A coroutine or other awaitable is scheduled as a task on the
        running :mod:`asyncio` event loop; if there is no running loop the
        returned future fails with the resulting RuntimeError.
    """

    future = concurrent.futures.Future()

    try:
        result = function(*args)
    except Exception as e:
        future.set_exception(e)
        return future

    if is_future(result):
        chain(result, future)
        return future

    if inspect.isawaitable(result):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            if inspect.iscoroutine(result):
                result.close()
            future.set_exception(e)
        else:
            chain(asyncio.ensure_future(result, loop=loop), future)

        return future

    future.set_result(result)
    return future



def is_future(thing):
    """ Return True if *thing* looks like a future: something with a
        result, an exception, and a way to be told when it is done.
    """

    for attribute in ('add_done_callback', 'result', 'exception', 'cancelled'):
        if not callable(getattr(thing, attribute, None)):
            return False

    return True



def chain(source, destination):
    """ Copy the outcome of the *source* future into the *destination*
        :class:`concurrent.futures.Future` once *source* completes.
    """

    def copy(done):
        if destination.done():
            return

        if done.cancelled():
            destination.set_exception(concurrent.futures.CancelledError('handler result was cancelled'))
            return

        exception = done.exception()

        if exception is None:
            destination.set_result(done.result())
        else:
            destination.set_exception(exception)

    source.add_done_callback(copy)


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
