import xchannel
from xchannel.transport.zmq import Socket


class Prices:
    """ Flux-style store: every command arrives through the 'dispatch'
        action as a method name and a payload.
    """

    def __init__(self):
        self.spot = dict()

    def dispatch(self, command):
        method = getattr(self, 'on_' + command['action'])
        return method(command['payload'])

    def on_update(self, payload):
        self.spot.update(payload)
        return sorted(self.spot)

    def on_quote(self, metal):
        return get_spot_value(self.spot, metal, 'grams')


def get_spot_value(spot, metal, units):

    current_price = spot[metal]

    if units == 'grams':
        current_price = current_price / 31.1035

    return round(current_price, 2)


def main():

    address = 'inproc://precious'
    daemon_socket = Socket(address, bind=True)
    client_socket = Socket(address)

    prices = Prices()
    daemon = xchannel.Channel(channel='precious', name='daemon', receiver=daemon_socket)
    daemon.on('dispatch', prices.dispatch)

    client = xchannel.Channel(channel='precious', name='client', receiver=client_socket)
    sender = client.create_sender(client_socket)

    print(sender.dispatch('update', {'gold': 2400.0, 'silver': 30.5}).result(timeout=5))
    print(sender.dispatch('quote', 'gold').result(timeout=5))

    try:
        sender.dispatch('quote', 'platinum').result(timeout=5)
    except xchannel.ReplyError as e:
        print('error:', e.error)

    client_socket.close()
    daemon_socket.close()


if __name__ == '__main__':
    main()


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
