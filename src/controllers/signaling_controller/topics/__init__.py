from .receivers.connect import init as init_connect
from .receivers.login import init as init_login
from .receivers.call import init as init_call
from .receivers.answer_call import init as init_answer_call
from .receivers.reject_call import init as init_reject_call
from .receivers.end_call import init as init_end_call
from .receivers.offer import init as init_offer
from .receivers.answer import init as init_answer
from .receivers.ice_candidate import init as init_ice_candidate
from .receivers.disconnect import init as init_disconnect


def initialize_all(server, router):

    # Initialize all topic receivers
    init_connect(server, router)
    init_login(server, router)
    init_call(server, router)
    init_answer_call(server, router)
    init_reject_call(server, router)
    init_end_call(server, router)
    init_offer(server, router)
    init_answer(server, router)
    init_ice_candidate(server, router)
    init_disconnect(server, router)
