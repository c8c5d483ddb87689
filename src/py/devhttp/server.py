import asyncio
import os
import socket
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from signal import SIGINT, SIGTERM
from typing import Any, Callable, NamedTuple

from .config import HOST, PORT
from .http.model import HTTPProcessingStatus, HTTPRequest, HTTPResponse
from .http.parser import HTTPParser
from .utils.limits import LimitType, unlimit
from .utils.logging import Logger

# The per-request callback, a plain function from request to response
TDispatcher = Callable[[HTTPRequest], HTTPResponse]


@dataclass(slots=True)
class ServerState:
	isRunning: bool = True
	# The port we're actually bound to, known once `ready` is set
	port: int | None = None
	ready: threading.Event = field(default_factory=threading.Event)

	def stop(self) -> None:
		self.isRunning = False


class ServerOptions(NamedTuple):
	host: str = HOST
	port: int = PORT
	backlog: int = 256
	# Grace period given to in-flight connections on shutdown
	timeout: float = 10.0
	# This is the polling timeout for accepting new requests, which is also
	# how long it takes to notice a stop request.
	polling: float = 0.25
	readsize: int = 4_096
	keepalive: float = 60.0
	# Number of threads dispatching requests, defaults to the CPU count
	workers: int | None = None
	stopSignals: bool = True


OPTIONS: ServerOptions = ServerOptions()

SERVER_BAD_REQUEST: bytes = (
	b"HTTP/1.1 400 Bad Request\r\n"
	b"Content-Type: text/plain; charset=utf-8\r\n"
	b"Content-Length: 11\r\n"
	b"Connection: close\r\n"
	b"\r\n"
	b"Bad Request"
)


class AIOSocketServer:
	"""AsyncIO backend using sockets directly. Requests are parsed on the
	event loop and dispatched in a thread pool, where the file system
	access happens."""

	@classmethod
	async def OnConnection(
		cls,
		dispatcher: TDispatcher,
		client: socket.socket,
		*,
		loop: asyncio.AbstractEventLoop,
		executor: ThreadPoolExecutor,
		logger: Logger,
		options: ServerOptions,
		state: ServerState,
	) -> None:
		"""Processes all the requests sent on the client connection, until
		it is closed, times out, asks not to be kept alive or the server
		stops."""
		buffer = bytearray(options.readsize)
		parser: HTTPParser = HTTPParser()
		keep_alive: bool = True
		req_count: int = 0
		res_count: int = 0
		try:
			while keep_alive:
				n = await cls.Receive(client, buffer, loop=loop, options=options, state=state)
				if n is None:
					if req_count != res_count:
						logger.warning(
							f"Client timed out ({req_count} requests, {res_count} responses)"
						)
					break
				elif not n:
					# A no-data means a close
					break
				# NOTE: With HTTP pipelining, we may receive more than one
				# request in the same payload, they're answered in order.
				for atom in parser.feed(bytes(buffer[:n])):
					if atom is HTTPProcessingStatus.BadFormat:
						logger.warning("Malformed request, closing connection")
						await loop.sock_sendall(client, SERVER_BAD_REQUEST)
						keep_alive = False
						break
					elif isinstance(atom, HTTPRequest):
						req_count += 1
						res = await loop.run_in_executor(executor, dispatcher, atom)
						await cls.SendResponse(res, client, loop=loop)
						res_count += 1
						if not atom.keepAlive:
							keep_alive = False
							break
		except (BrokenPipeError, ConnectionResetError):
			# Client did an early close
			logger.debug(f"Client closed the connection after {res_count} responses")
		except Exception as e:
			logger.exception(e, "Connection failed")
		finally:
			client.close()

	@staticmethod
	async def Receive(
		client: socket.socket,
		buffer: bytearray,
		*,
		loop: asyncio.AbstractEventLoop,
		options: ServerOptions,
		state: ServerState,
	) -> int | None:
		"""Reads from the client into the buffer, returning the number of
		bytes read, or `None` when the connection stayed idle past the
		keep-alive timeout or the server is stopping."""
		idle: float = 0.0
		while state.isRunning and idle < options.keepalive:
			try:
				return await asyncio.wait_for(
					loop.sock_recv_into(client, buffer),
					timeout=options.polling,
				)
			except asyncio.TimeoutError:
				idle += options.polling
		return None

	@staticmethod
	async def SendResponse(
		response: HTTPResponse,
		client: socket.socket,
		*,
		loop: asyncio.AbstractEventLoop,
	) -> None:
		"""Writes the head and the body (if any) of the response."""
		payload = response.head()
		if response.body:
			payload += response.body
		await loop.sock_sendall(client, payload)

	@classmethod
	async def Serve(
		cls,
		dispatcher: TDispatcher,
		logger: Logger,
		options: ServerOptions = OPTIONS,
		state: ServerState | None = None,
	) -> None:
		"""Main server coroutine. Returns once the server has been stopped and
		all its resources, logger included, have been released."""
		state = state or ServerState()
		server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
		server.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
		server.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
		try:
			server.bind((options.host, options.port))
		except OSError as e:
			server.close()
			logger.error(
				f"Unable to bind to {options.host}:{options.port}: {e.strerror or e}"
			)
			raise e
		# The argument is the backlog of connections that will be accepted before
		# they are refused.
		server.listen(options.backlog)
		# This is what we need to use it with asyncio
		server.setblocking(False)
		state.port = server.getsockname()[1]

		loop = asyncio.get_running_loop()
		executor = ThreadPoolExecutor(
			max_workers=options.workers or os.cpu_count() or 1,
			thread_name_prefix="devhttp",
		)
		tasks: set[asyncio.Task[None]] = set()

		# Registers handlers for signals and exception (so that we log them). Note
		# that we'll get a `set_wakeup_fd only works in main thread of the main interpreter`
		# when this is not run out of the main thread.
		if (
			options.stopSignals
			and threading.current_thread() is threading.main_thread()
		):
			loop.add_signal_handler(SIGINT, state.stop)
			loop.add_signal_handler(SIGTERM, state.stop)

		def onException(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
			e = context.get("exception")
			if e:
				logger.exception(e)
			else:
				logger.error(str(context.get("message")))

		loop.set_exception_handler(onException)

		logger.info(f"Server running at http://{options.host}:{state.port}")
		state.ready.set()
		try:
			while state.isRunning:
				try:
					client, _ = await asyncio.wait_for(
						loop.sock_accept(server), timeout=options.polling
					)
				except asyncio.TimeoutError:
					continue
				except OSError as e:
					# This can be: [OSError] [Errno 24] Too many open files
					if e.errno == 24:
						await asyncio.sleep(0.1)
					else:
						logger.exception(e)
					continue
				task = loop.create_task(
					cls.OnConnection(
						dispatcher,
						client,
						loop=loop,
						executor=executor,
						logger=logger,
						options=options,
						state=state,
					)
				)
				tasks.add(task)
				task.add_done_callback(tasks.discard)
		finally:
			logger.info("Shutting down HTTP server")
			# We stop accepting new connections, and give the in-flight ones
			# some time to complete.
			server.close()
			if tasks:
				_, pending = await asyncio.wait(set(tasks), timeout=options.timeout)
				for task in pending:
					task.cancel()
				await asyncio.gather(*pending, return_exceptions=True)
			executor.shutdown(wait=True)
			if options.stopSignals and threading.current_thread() is threading.main_thread():
				loop.remove_signal_handler(SIGINT)
				loop.remove_signal_handler(SIGTERM)
			logger.close()


def run(
	dispatcher: TDispatcher,
	logger: Logger,
	*,
	host: str = HOST,
	port: int = PORT,
	backlog: int = OPTIONS.backlog,
	timeout: float = OPTIONS.timeout,
	keepalive: float = OPTIONS.keepalive,
	workers: int | None = None,
) -> None:
	"""High level function to run the server until it is interrupted."""
	unlimit(LimitType.Files)
	options = ServerOptions(
		host=host,
		port=port,
		backlog=backlog,
		timeout=timeout,
		keepalive=keepalive,
		workers=workers,
	)
	try:
		asyncio.run(AIOSocketServer.Serve(dispatcher, logger, options))
	except KeyboardInterrupt:
		# Only happens when the signal handlers could not be installed
		logger.close()


# EOF
