
import weakref


def ref(thing):
    """ Return a weak reference to the supplied argument, regardless of
        whether it is a simple object or a bound method.
    """

    try:
        thing.__func__
        thing.__self__
    except AttributeError:
        return weakref.ref(thing)
    else:
        return weakref.WeakMethod(thing)



class Listener:
    """ Callable wrapper for a message handler attached to a host handle.
        With *weak* set, a bound method is held by weak reference, so that
        a host which outlives a :class:`xchannel.Channel` does not keep
        that channel alive through its listener list; any other callable
        (a function, a lambda) is always held normally, as it would
        otherwise be collected immediately.

        Calling a :class:`Listener` whose target is gone is a no-op that
        returns False; otherwise the target is invoked and True returned.
    """

    def __init__(self, function, weak=True):

        if not weak:
            self._strong = function
            self._weak = None
            return

        try:
            function.__func__
            function.__self__
        except AttributeError:
            self._strong = function
            self._weak = None
        else:
            self._strong = None
            self._weak = ref(function)


    def __call__(self, *args, **kwargs):

        function = self.target()

        if function is None:
            return False

        function(*args, **kwargs)
        return True


    @property
    def alive(self):
        return self.target() is not None


    def target(self):
        if self._weak is None:
            return self._strong

        return self._weak()


# end of class Listener


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
