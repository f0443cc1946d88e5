import concurrent.futures
import pytest
import xchannel

from xchannel.errors import ActionNotFound, CorrelationError, ReplyError, ReservedActionError, TransportError
from xchannel.protocol import fields


def test_api():

    channel = xchannel.Channel()
    assert callable(channel.listen)
    assert callable(channel.unlisten)
    assert callable(channel.create_sender)
    assert callable(channel.on)
    assert callable(channel.off)
    assert callable(channel.once)

    sender = channel.create_sender(object())
    assert isinstance(sender, xchannel.Sender)
    assert callable(sender.send)
    assert callable(sender.send_then)
    assert callable(sender.dispatch)


def test_defaults():

    first = xchannel.Channel()
    second = xchannel.Channel()

    assert first.name != second.name
    assert first.origin == '*'
    assert first.pending == 0
    assert first.listening == False


def test_action_invoked_once(endpoints, recorder):

    a, b, sender = endpoints
    handler = recorder()
    b.on('test', handler)

    for payload in ('hello', 42, None, [1, 2, 3], {'nested': {'key': True}}):
        handler.calls.clear()
        sender.send('test', payload)
        assert handler.calls == [payload]


def test_fire_and_forget_has_no_reply(endpoints, recorder):

    a, b, sender = endpoints
    b.on('test', recorder('ignored'))

    cid = sender.send('test', 'hello')
    assert cid is None
    assert a.pending == 0


def test_reply(endpoints):

    a, b, sender = endpoints
    b.on('test', lambda data: data + ' world')

    replies = list()
    cid = sender.send('test', 'hello', lambda error, data: replies.append((error, data)))

    assert cid == 1
    assert replies == [(None, 'hello world')]
    assert a.pending == 0


def test_send_then(endpoints):

    a, b, sender = endpoints
    b.on('test', lambda data: {'echo': data})

    future = sender.send_then('test', 'hello')
    assert future.result(timeout=1) == {'echo': 'hello'}


def test_correlation_ids_increase(endpoints):

    a, b, sender = endpoints
    b.on('test', lambda data: data)

    ids = list()
    for number in range(5):
        ids.append(sender.send('test', number, lambda error, data: None))

    assert ids == [1, 2, 3, 4, 5]


def test_self_echo_rejected():

    bus = xchannel.transport.local.Bus()

    a = xchannel.Channel(channel='unittest', name='a', receiver=bus)
    b = xchannel.Channel(channel='unittest', name='b', receiver=bus)

    a_calls = list()
    b_calls = list()
    a.on('test', a_calls.append)
    b.on('test', b_calls.append)

    sender = a.create_sender(bus)
    future = sender.send_then('test', 'hello')

    # The bus delivers the request to both endpoints; only b acts on it.
    # The reply likewise reaches both, and only a resolves it.

    assert a_calls == list()
    assert b_calls == ['hello']
    assert future.result(timeout=1) is None


def test_self_echo_invokes_no_callback():

    bus = xchannel.transport.local.Bus()
    a = xchannel.Channel(channel='unittest', name='a', receiver=bus)

    replies = list()
    sender = a.create_sender(bus)
    cid = sender.send('test', 'hello', lambda error, data: replies.append(error))

    # Forge a reply that appears to come from a itself.
    a._recv({'channel': 'unittest', 'from': 'a', 'action': fields.CALLBACK, 'cid': cid, 'data': {}}, bus)

    assert replies == list()
    assert a.pending == 1


def test_foreign_channel_ignored(ports, recorder):

    near, far = ports

    a = xchannel.Channel(channel='unittest', name='a', receiver=near)
    b = xchannel.Channel(channel='elsewhere', name='b', receiver=far)

    handler = recorder()
    b.on('test', handler)

    replies = list()
    a.create_sender(near).send('test', 'hello', lambda error, data: replies.append(data))

    assert handler.calls == list()
    assert replies == list()
    assert a.pending == 1


def test_malformed_payloads_ignored(recorder):

    channel = xchannel.Channel(channel='unittest', name='a')
    handler = recorder()
    channel.on('test', handler)

    for payload in (None, 'test', 42, ['test'], b'test'):
        channel._recv(payload, None)

    assert handler.calls == list()


def test_action_not_found(endpoints):

    a, b, sender = endpoints

    future = sender.send_then('missing', 'hello')

    with pytest.raises(ReplyError) as caught:
        future.result(timeout=1)

    message = caught.value.error['message']
    assert message == 'channel "unittest.b.missing" not found'
    assert 'unittest' in message
    assert '.b.' in message
    assert 'missing' in message


def test_off(endpoints, recorder):

    a, b, sender = endpoints
    handler = recorder()

    b.on('test', handler)
    b.off('test')
    b.off('test')
    b.off('never registered')

    with pytest.raises(ReplyError):
        sender.send_then('test', 'hello').result(timeout=1)

    assert handler.calls == list()


def test_last_registration_wins(endpoints):

    a, b, sender = endpoints

    b.on('test', lambda data: 'first')
    b.on('test', lambda data: 'second')

    assert sender.send_then('test').result(timeout=1) == 'second'


def test_once(endpoints, recorder):

    a, b, sender = endpoints
    handler = recorder('done')
    b.once('test', handler)

    assert sender.send_then('test', 1).result(timeout=1) == 'done'

    future = sender.send_then('test', 2)
    with pytest.raises(ReplyError) as caught:
        future.result(timeout=1)

    assert 'not found' in caught.value.error['message']
    assert handler.calls == [1]


def test_once_replaced_before_firing(endpoints):

    a, b, sender = endpoints

    b.once('test', lambda data: 'once')
    b.on('test', lambda data: 'always')

    assert sender.send_then('test').result(timeout=1) == 'always'
    assert sender.send_then('test').result(timeout=1) == 'always'


def test_reserved_action():

    channel = xchannel.Channel()

    with pytest.raises(ReservedActionError):
        channel.on(fields.CALLBACK, lambda data: None)

    with pytest.raises(ValueError):
        channel.once(fields.CALLBACK, lambda data: None)


def test_handler_raises(endpoints):

    a, b, sender = endpoints

    def boom(data):
        raise Exception('boom')

    b.on('test', boom)

    replies = list()
    sender.send('test', None, lambda error, data: replies.append((error, data)))

    assert replies == [({'message': 'boom'}, None)]


def test_handler_raises_without_reply(endpoints):

    a, b, sender = endpoints

    def boom(data):
        raise RuntimeError('boom')

    b.on('test', boom)

    # Nobody asked for a reply, so there is nobody to tell.
    sender.send('test')


def test_handler_raises_reply_error(endpoints):

    a, b, sender = endpoints

    def reject(data):
        raise ReplyError({'code': 404, 'reason': 'absent'})

    b.on('test', reject)

    with pytest.raises(ReplyError) as caught:
        sender.send_then('test').result(timeout=1)

    assert caught.value.error == {'code': 404, 'reason': 'absent'}


def test_deferred_result(endpoints):

    a, b, sender = endpoints
    results = dict()

    def later(data):
        future = concurrent.futures.Future()
        results[data] = future
        return future

    b.on('test', later)

    first = sender.send_then('test', 'first')
    second = sender.send_then('test', 'second')
    assert not first.done()
    assert not second.done()

    results['second'].set_result(2)
    assert second.result(timeout=1) == 2
    assert not first.done()

    results['first'].set_exception(ValueError('rejected'))

    with pytest.raises(ReplyError) as caught:
        first.result(timeout=1)

    assert caught.value.error == {'message': 'rejected'}


def test_out_of_order_replies(endpoints):

    a, b, sender = endpoints
    results = list()

    def later(data):
        future = concurrent.futures.Future()
        results.append((data, future))
        return future

    b.on('test', later)

    futures = [sender.send_then('test', number) for number in range(10)]
    assert a.pending == 10

    for order in (7, 2, 9, 0, 4, 1, 8, 3, 6, 5):
        data, future = results[order]
        future.set_result(data * 100)

    for number, future in enumerate(futures):
        assert future.result(timeout=1) == number * 100

    assert a.pending == 0


def test_unmatched_reply_dropped(endpoints):

    a, b, sender = endpoints

    a._recv({'channel': 'unittest', 'from': 'b', 'action': fields.CALLBACK, 'cid': 99, 'data': {'data': 1}}, None)
    a._recv({'channel': 'unittest', 'from': 'b', 'action': fields.CALLBACK, 'data': {'data': 1}}, None)

    assert a.pending == 0


def test_duplicate_reply_dropped(endpoints):

    a, b, sender = endpoints

    replies = list()
    cid = a._register(lambda error, data: replies.append(data), False)

    reply = {'channel': 'unittest', 'from': 'b', 'action': fields.CALLBACK, 'cid': cid, 'data': {'data': 'one'}}
    a._recv(reply, None)
    a._recv(reply, None)

    assert replies == ['one']
    assert a.pending == 0


def test_persistent_callback(endpoints):

    a, b, sender = endpoints

    replies = list()
    cid = a._register(lambda error, data: replies.append(data), True)

    for value in ('one', 'two', 'three'):
        reply = {'channel': 'unittest', 'from': 'b', 'action': fields.CALLBACK, 'cid': cid, 'data': {'data': value}}
        a._recv(reply, None)

    assert replies == ['one', 'two', 'three']
    assert a.pending == 1

    a.forget(cid)
    a._recv(reply, None)

    assert replies == ['one', 'two', 'three']
    assert a.pending == 0


def test_persistent_send(endpoints):

    a, b, sender = endpoints
    b.on('test', lambda data: data)

    replies = list()
    cid = sender.send('test', 'hello', lambda error, data: replies.append(data), persistent=True)

    assert replies == ['hello']
    assert a.pending == 1

    # The remote side can keep answering the same request.
    b.create_sender(b._receiver.handle).send(fields.CALLBACK, {'data': 'again'}, cid)

    assert replies == ['hello', 'again']


def test_reply_to_reply(endpoints):

    a, b, sender = endpoints

    replies = list()
    cid = sender.send('test', None, lambda error, data: replies.append((error, data)), persistent=True)
    assert a.pending == 1

    # An integer callback is used as the correlation id, with nothing
    # registered on the sending side.

    seen = list()
    b.on('answer', lambda data: seen.append(data))
    pending = b.pending
    assert sender.send('answer', 'hello', cid) == cid
    assert seen == ['hello']
    assert b.pending == pending


def test_supplied_cid(endpoints):

    a, b, sender = endpoints
    b.on('test', lambda data: None)

    # Hold the reply back so the id stays pending.
    b.on('slow', lambda data: concurrent.futures.Future())

    cid = sender.send('slow', None, lambda error, data: None, cid=3)
    assert cid == 3

    with pytest.raises(CorrelationError):
        sender.send('slow', None, lambda error, data: None, cid=3)

    # Automatically allocated ids skip the claimed one.
    ids = [sender.send('slow', None, lambda error, data: None) for number in range(3)]
    assert ids == [1, 2, 4]


def test_invalid_callback(endpoints):

    a, b, sender = endpoints

    with pytest.raises(TypeError):
        sender.send('test', None, 'not a callback')


def test_listen_replaces(ports, recorder):

    near, far = ports
    other_near, other_far = xchannel.transport.local.pair()

    b = xchannel.Channel(channel='unittest', name='b')
    b.listen(far)
    assert far.listeners == 1

    b.listen(other_far)
    assert far.listeners == 0
    assert other_far.listeners == 1

    b.unlisten()
    b.unlisten()
    assert other_far.listeners == 0
    assert b.listening == False


def test_listen_without_handle():

    channel = xchannel.Channel()
    channel.listen(None)
    assert channel.listening == False

    channel.listen(object())
    assert channel.listening == False


def test_sender_without_transport():

    channel = xchannel.Channel()
    sender = channel.create_sender(object())
    assert sender.kind is None

    with pytest.raises(TransportError):
        sender.send('test')

    with pytest.raises(TransportError):
        sender.send_then('test')

    assert channel.pending == 0


def test_unserializable_result(endpoints):

    a, b, sender = endpoints
    b.on('test', lambda data: object())

    with pytest.raises(ReplyError) as caught:
        sender.send_then('test').result(timeout=1)

    assert 'could not be cloned' in caught.value.error['message']


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
