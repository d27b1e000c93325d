# devbase

A small toolbox for software running on networked Linux devices. Everything
lives in one package with no third-party dependencies:

| Module | What it offers |
| --- | --- |
| `devbase.aes` | AES-128 block cipher (`Aes128`) and module-level `encrypt` / `decrypt` that work block by block with a shared key (`set_key`, `get_key`) |
| `devbase.mp3` | MP3 frame header checks and decoding (`check_header`, `parse_frame_header`, `Mp3Frame`, `Mp3Info`), from a file or an in-memory buffer |
| `devbase.mempool` | A thread-safe pool of fixed-size blocks (`MemoryPool`, `Block`) that grows on demand |
| `devbase.workqueue` | A blocking FIFO (`WorkQueue`), one served by a background thread (`WorkerQueue`) and `MessageHandler` |
| `devbase.console` | A line-oriented command prompt (`command_loop`, `init_interface`, `normalize_command`) |
| `devbase.files` | File length, text after the last separator, recursive directory scanning |
| `devbase.udp` | UDP listeners and broadcast sockets |
| `devbase.tcp` | TCP client and server sockets, buffer sizes, blocking mode, TCP_NODELAY, name lookup with a timeout, interface addresses |
| `devbase.epoll_server` | An edge-triggered epoll loop with connect and receive callbacks (`EpollServer`) |
| `devbase.download` | A plain HTTP/1.1 file downloader with URL and response-header parsing |
| `devbase.serial_port` | Opening and configuring a serial line in raw 8N1 mode |
| `devbase.charset` | UTF-8 ⇄ GB2312 conversion |

Several modules use Linux-only interfaces (`epoll`, `fcntl`, `termios`).

## Encrypting data

```python
from devbase.aes import Aes128, decrypt, encrypt

sealed = encrypt(b"hello device")    # zero-padded up to a whole 16-byte block
plain = decrypt(sealed)
assert plain.startswith(b"hello device")

cipher = Aes128(bytes(16))           # a key of your own: exactly 16 bytes
block = cipher.encrypt_block(b"0123456789abcdef")
assert cipher.decrypt_block(block) == b"0123456789abcdef"
```

`encrypt` and `decrypt` use a shared module key. `set_key` writes at most 15
bytes of text and a terminating NUL over the start of that key; the bytes after
the NUL keep their previous values. `get_key` returns the current 16 bytes.
No padding is removed on decryption.

## Reading MP3 headers

```python
from devbase.mp3 import parse_mp3_stream, read_mp3_header, total_time

with open("song.mp3", "rb") as fh:
    info = read_mp3_header(fh)        # scans for the first valid frame header
print(info.rate, info.channel, info.bitrate)

with open("song.mp3", "rb") as fh:
    info = parse_mp3_stream(fh.read(3000))
```

Both return an `Mp3Info` of zeros when no valid header is found.
`find_next_frame` raises `ValueError` instead, and `total_time(bitrate,
file_length)` gives the play time in seconds.

## Pooling buffers

```python
from devbase.mempool import MemoryPool

pool = MemoryPool(block_size=1500, init_size=4, grow_size=2)
block = pool.acquire()        # a Block with a zeroed bytearray of 1500 bytes
block.data[:5] = b"hello"
pool.release(block)           # zeroed again and returned to the pool
pool.destroy()
```

## Handing work to a background thread

```python
from devbase.workqueue import WorkerQueue

def handle(msg, size):
    print("got", msg)

queue = WorkerQueue(handle)
queue.put("hello", 5)
left = queue.close(lambda msg, size: None)   # unhandled messages go to this callback
```

`WorkQueue` on its own is a plain blocking FIFO: `put(msg, size)` and
`get()`, which waits for the next `(msg, size)` pair.

## Scanning a directory

```python
from devbase.files import iter_files, scan_dir

for path, name in iter_files("/srv/media"):
    print(path, name)

count = scan_dir("/srv/media", lambda path, name: None)
```

Only regular files are reported; symbolic links are not followed.

## Sockets

```python
from devbase import tcp, udp

server = tcp.create_server(None, 9000)            # listening on every interface
listener = udp.create_listen_udp_timeout(None, 9001, 2)
sock, address = udp.create_client_broadcast(9001)
sock.sendto(b"ping", address)
```

`devbase.epoll_server.EpollServer` watches a set of sockets: set its
`listen_socket` and add it with `add_socket` to have new connections accepted
and passed to the connect callback; input on other sockets goes to the
receive callback. Call `poll_once` or `listen_forever`.

`devbase.download.download_http_file(url, directory)` fetches a file over plain
HTTP into `directory` and returns the parsed `ResponseHeader`; it raises
`DownloadError` on failure.

## What is not included

- There is no JSON support; use the standard `json` module.
- There is no lookup of the device's public address.
- MP3 support stops at frame headers: nothing here decodes or plays audio.
- The package provides no command-line program or service of its own; it is a
  library to build those from.

## Tests

The test suite uses pytest, which is available through the `test` extra.