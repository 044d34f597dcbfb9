# pipeline.py
"""
Concurrent simulation pipeline.

One SimulationWorker per initial condition integrates its own trajectory
in a thread pool and pushes every position into a shared, unbounded
SampleChannel. A single Rasterizer drains the channel in the calling
thread. The channel reports exhaustion once the last sender is closed
and nothing is buffered, which is the only completion signal the
aggregator relies on.
"""
import logging
import threading
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from configuration import InitialCondition, ScatteringConfig
from particle import Sample, create_trajectory_state
from simulation import Integrator
from visualization import RasterBuffer, Rasterizer

# --- Data Contracts ---
#
# class SampleChannel:
#   - sender(self) -> SampleSender: registers one more producer.
#   - receiver(self) -> SampleReceiver: the single consumer handle.
#   - Invariants: FIFO per producer. Sends never block. Exhausted once
#     every registered sender is closed and the buffer is empty.
#
# class SimulationWorker:
#   - run(self) -> None:
#     - Side Effects: Sends `iterations` Samples tagged with worker_id,
#       then closes its sender.
#     - Failure mode: Raises ChannelClosed if the receiver is gone; the
#       worker stops immediately.
#
# run_pipeline(config: ScatteringConfig) -> PipelineResult:
#   - Outputs: One RasterBuffer per initial condition plus counters.
#   - Invariants: samples_received == sum of samples sent by all workers.


class ChannelClosed(Exception):
    """Raised when sending on a channel whose receiver has terminated."""


class SampleChannel:
    """
    Multi-producer, single-consumer queue of Samples.
    """
    def __init__(self):
        self._buffer = deque()
        self._condition = threading.Condition()
        self._open_senders = 0
        self._receiver_closed = False

    def sender(self) -> "SampleSender":
        with self._condition:
            if self._receiver_closed:
                raise ChannelClosed("Cannot attach a sender: the receiver is closed.")
            self._open_senders += 1
        return SampleSender(self)

    def receiver(self) -> "SampleReceiver":
        return SampleReceiver(self)

    @property
    def open_senders(self) -> int:
        with self._condition:
            return self._open_senders

    def _put(self, sample: Sample) -> None:
        with self._condition:
            if self._receiver_closed:
                raise ChannelClosed(f"Receiver closed; sample from worker {sample.worker_id} dropped.")
            self._buffer.append(sample)
            self._condition.notify()

    def _release_sender(self) -> None:
        with self._condition:
            self._open_senders -= 1
            if self._open_senders == 0:
                logging.debug("Last sender closed. Channel will drain and finish.")
                self._condition.notify_all()

    def _get(self) -> Optional[Sample]:
        """Blocks until a sample arrives. Returns None once exhausted."""
        with self._condition:
            while not self._buffer and self._open_senders > 0:
                self._condition.wait()
            if self._buffer:
                return self._buffer.popleft()
            return None

    def _close_receiver(self) -> None:
        with self._condition:
            self._receiver_closed = True
            dropped = len(self._buffer)
            self._buffer.clear()
        if dropped:
            logging.warning(f"Receiver closed with {dropped} unconsumed samples.")


class SampleSender:
    """Producer handle. Closing the last one ends the stream."""
    def __init__(self, channel: SampleChannel):
        self._channel = channel
        self._closed = False

    def send(self, sample: Sample) -> None:
        if self._closed:
            raise ChannelClosed("Sender already closed.")
        self._channel._put(sample)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._channel._release_sender()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SampleReceiver:
    """Consumer handle. Iterating drains the channel until exhaustion."""
    def __init__(self, channel: SampleChannel):
        self._channel = channel

    def __iter__(self) -> Iterator[Sample]:
        while True:
            sample = self._channel._get()
            if sample is None:
                return
            yield sample

    def close(self) -> None:
        self._channel._close_receiver()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class SimulationWorker:
    """
    Integrates one trajectory and streams its positions to the channel.
    """
    def __init__(self, initial: InitialCondition, config: ScatteringConfig, sender: SampleSender):
        self.initial = initial
        self.worker_id = initial.worker_id
        self.config = config
        self.sender = sender
        self.samples_sent = 0

    def run(self) -> None:
        run = self.config.run
        with self.sender:
            state = create_trajectory_state(self.initial, self.config.initial_speed, self.config.femto)
            integrator = Integrator(state, run.time_step, run.iterations, self.config.physics, self.config.femto)
            logging.info(f"Worker {self.worker_id} ({self.initial.name}) started: {run.iterations} steps.")

            for x, y in integrator:
                self.sender.send(Sample(self.worker_id, x, y))
                self.samples_sent += 1

                # Rule 2.4: Hot loops must throttle logs
                if self.samples_sent % run.log_throttle_steps == 0:
                    logging.debug(
                        f"Worker {self.worker_id} step {self.samples_sent}/{run.iterations} "
                        f"at ({x:.2f} fm, {y:.2f} fm)"
                    )

        logging.info(f"Worker {self.worker_id} finished after {self.samples_sent} samples.")


@dataclass
class PipelineResult:
    buffers: Dict[int, RasterBuffer]
    samples_received: int
    samples_drawn: int
    samples_per_worker: Dict[int, int]
    failures: Dict[int, BaseException] = field(default_factory=dict)


def run_pipeline(config: ScatteringConfig) -> PipelineResult:
    """
    Runs every worker concurrently and rasterizes their samples.

    The thread pool owns all workers. The aggregator drains the channel
    in the calling thread, then the pool is joined and each worker's
    outcome is checked. A failing worker is logged and does not affect
    its siblings.

    Args:
        config (ScatteringConfig): The frozen run configuration.

    Returns:
        PipelineResult: Finished raster buffers keyed by worker id.
    """
    channel = SampleChannel()
    # All senders are attached before any work starts, so the channel
    # cannot report exhaustion early.
    workers = [
        SimulationWorker(initial, config, channel.sender())
        for initial in config.initial_conditions
    ]
    rasterizer = Rasterizer(
        config.raster,
        [worker.worker_id for worker in workers],
        log_throttle=config.run.log_throttle_steps,
    )
    failures = {}

    with ThreadPoolExecutor(max_workers=max(len(workers), 1), thread_name_prefix="worker") as executor:
        futures = [(worker, executor.submit(worker.run)) for worker in workers]

        with channel.receiver() as receiver:
            rasterizer.consume(receiver)

        for worker, future in futures:
            error = future.exception()
            if error is not None:
                logging.error(f"Worker {worker.worker_id} terminated: {error!r}")
                failures[worker.worker_id] = error

    logging.info(
        f"Pipeline finished: {rasterizer.samples_received} samples received, "
        f"{rasterizer.samples_drawn} inside the frame, {len(failures)} failed workers."
    )
    return PipelineResult(
        buffers=rasterizer.buffers,
        samples_received=rasterizer.samples_received,
        samples_drawn=rasterizer.samples_drawn,
        samples_per_worker=dict(rasterizer.samples_per_worker),
        failures=failures,
    )
