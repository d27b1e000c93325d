"""Building blocks for networked devices: AES-128, MP3 headers, queues, pools and sockets."""

__version__ = "0.1.0"

__all__ = [
    "aes",
    "charset",
    "console",
    "download",
    "epoll_server",
    "files",
    "mempool",
    "mp3",
    "serial_port",
    "tcp",
    "udp",
    "workqueue",
]