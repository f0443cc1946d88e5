""" Environment-derived defaults for :class:`xchannel.Channel` instances.
"""

import os
import uuid


wildcard = '*'


def origin(default=None):
    """ Return the origin hint a :class:`xchannel.Channel` passes to its
        outbound transports when none is given at construction. This
        defaults to the wildcard ``*`` (accept any destination), but can
        be overridden by calling this method with a string, or by setting
        the ``XCHANNEL_ORIGIN`` environment variable. Note that changes to
        the environment variable will be ignored unless it is set prior to
        the first invocation of this method.

        The origin hint is passed through to the transport untouched; it is
        never enforced here.
    """

    if default is not None:
        default = str(default)

        if default == '':
            raise ValueError('the default origin must be a non-empty string')

        os.environ['XCHANNEL_ORIGIN'] = default
        origin.found = default


    found = origin.found

    if found is not None:
        return found

    try:
        found = os.environ['XCHANNEL_ORIGIN']
    except KeyError:
        found = wildcard

    if found == '':
        found = wildcard

    origin.found = found
    return found

origin.found = None



def endpoint_name():
    """ Generate a locally unique endpoint name, for channels constructed
        without one. Two unnamed endpoints must never share a name, as the
        name is what a channel uses to discard its own echoed messages.
    """

    return uuid.uuid4().hex


# vim: set expandtab tabstop=8 softtabstop=4 shiftwidth=4 autoindent:
