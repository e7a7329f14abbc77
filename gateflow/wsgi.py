import eventlet
eventlet.monkey_patch()

import os  # noqa: E402

from gateflow.manage import create_app  # noqa: E402
from gateflow.utils.broadcaster import socketio  # noqa: E402

app = create_app()


def main():
    socketio.run(app, host="0.0.0.0", port=int(os.getenv('PORT', 5001)))


if __name__ == '__main__':
    main()
