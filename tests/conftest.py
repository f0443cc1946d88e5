import pytest
import xchannel


@pytest.fixture
def ports():
    return xchannel.transport.local.pair()


@pytest.fixture
def endpoints(ports):
    """ Two endpoints of the 'unittest' channel, each listening on its own
        end of an in-process port pair. The sender belongs to the first
        endpoint and delivers to the second.
    """

    near, far = ports

    a = xchannel.Channel(channel='unittest', name='a', receiver=near)
    b = xchannel.Channel(channel='unittest', name='b', receiver=far)

    sender = a.create_sender(near)

    yield a, b, sender

    a.unlisten()
    b.unlisten()


class Recorder:
    """ Stand-in action handler that remembers what it was called with.
    """

    def __init__(self, result=None):
        self.calls = list()
        self.result = result

    def __call__(self, data):
        self.calls.append(data)
        return self.result


@pytest.fixture
def recorder():
    return Recorder


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
