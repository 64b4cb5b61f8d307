"""Execution strategies for fanning independent units of work out to workers."""

import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Sequence, TypeVar

from tqdm import tqdm

# Optional Ray import for parallelization
try:
    import ray

    RAY_AVAILABLE = True
except ImportError:
    RAY_AVAILABLE = False

T = TypeVar("T")
R = TypeVar("R")

STRATEGY_KINDS = ("sequential", "threads", "ray")


class ExecutionStrategy(ABC):
    """
    Abstract base class for execution strategies.

    Units never depend on each other. A failing unit is reported and left out
    of the results; it never aborts the rest of the run.
    """

    def __init__(self, show_progress: bool = True):
        self.show_progress = show_progress

    @abstractmethod
    def run(
        self,
        work: Callable[[T], R],
        items: Sequence[T],
        desc: str,
        on_complete: Callable[[R], None] | None = None,
    ) -> list[R]:
        """Apply work to every item and return the successful results in item order.

        on_complete is called once per successful unit, possibly from a worker thread.
        """
        pass


def _report_failure(desc: str, error: BaseException) -> None:
    tqdm.write(f"Warning: Task failed during {desc}: {error!r}")


class SequentialExecutionStrategy(ExecutionStrategy):
    """Execute units one after another with progress tracking."""

    def run(self, work, items, desc, on_complete=None):
        results = []
        for item in tqdm(items, desc=desc, disable=not self.show_progress):
            try:
                result = work(item)
            except Exception as e:
                _report_failure(desc, e)
                continue
            if on_complete is not None:
                on_complete(result)
            results.append(result)
        return results


class ThreadedExecutionStrategy(ExecutionStrategy):
    """Execute units on a fixed-size pool of worker threads."""

    def __init__(self, num_workers: int | None = None, show_progress: bool = True):
        super().__init__(show_progress)
        self.num_workers = num_workers or os.cpu_count() or 1

    def run(self, work, items, desc, on_complete=None):
        def unit(item):
            result = work(item)
            if on_complete is not None:
                on_complete(result)
            return result

        results: list = [None] * len(items)
        succeeded = [False] * len(items)

        with ThreadPoolExecutor(max_workers=self.num_workers) as executor:
            futures = {executor.submit(unit, item): index for index, item in enumerate(items)}
            with tqdm(total=len(futures), desc=f"{desc} (threads)", disable=not self.show_progress) as pbar:
                for future in as_completed(futures):
                    index = futures[future]
                    try:
                        results[index] = future.result()
                        succeeded[index] = True
                    except Exception as e:
                        _report_failure(desc, e)
                    pbar.update(1)

        return [result for result, ok in zip(results, succeeded) if ok]


class ParallelExecutionStrategy(ExecutionStrategy):
    """Execute units as Ray tasks; on_complete runs in the driver."""

    def __init__(self, ray_num_cpus: int | None = None, show_progress: bool = True):
        super().__init__(show_progress)
        self.ray_num_cpus = ray_num_cpus
        self._ray_initialized = False

    def run(self, work, items, desc, on_complete=None):
        if not RAY_AVAILABLE or not self._initialize_ray():
            # Fallback to a local thread pool if Ray is not usable
            fallback = ThreadedExecutionStrategy(self.ray_num_cpus, self.show_progress)
            return fallback.run(work, items, desc, on_complete)

        try:
            return self._run_parallel(work, items, desc, on_complete)
        finally:
            self._cleanup_ray()

    def _run_parallel(self, work, items, desc, on_complete):
        tqdm.write(f"  Using Ray parallel execution with {len(items)} tasks")

        # Put the work function in the object store once, share across tasks
        work_ref = ray.put(work)
        future_to_index = {
            _run_unit_parallel.remote(work_ref, item): index for index, item in enumerate(items)
        }

        results: list = [None] * len(items)
        succeeded = [False] * len(items)
        remaining_futures = list(future_to_index)

        with tqdm(total=len(remaining_futures), desc=f"{desc} (parallel)", disable=not self.show_progress) as pbar:
            while remaining_futures:
                ready, remaining_futures = ray.wait(remaining_futures, num_returns=1)
                for future in ready:
                    index = future_to_index[future]
                    try:
                        result = ray.get(future)
                    except Exception as e:
                        _report_failure(desc, e)
                    else:
                        if on_complete is not None:
                            on_complete(result)
                        results[index] = result
                        succeeded[index] = True
                    pbar.update(1)

        return [result for result, ok in zip(results, succeeded) if ok]

    def _initialize_ray(self) -> bool:
        """Initialize Ray if not already running."""
        if self._ray_initialized:
            return True

        try:
            if ray.is_initialized():
                # Ray is already initialized by the caller, leave it running afterwards
                return True

            init_kwargs = {"ignore_reinit_error": True}
            if self.ray_num_cpus is not None:
                init_kwargs["num_cpus"] = self.ray_num_cpus

            ray.init(**init_kwargs)
            self._ray_initialized = True
            return True

        except Exception as e:
            print(f"Warning: Failed to initialize Ray: {e}")
            print("Falling back to thread pool execution")
            return False

    def _cleanup_ray(self) -> None:
        """Clean up Ray resources if we initialized them."""
        if self._ray_initialized and ray.is_initialized():
            try:
                ray.shutdown()
            except Exception as e:
                print(f"Warning: Error during Ray cleanup: {e}")
            finally:
                self._ray_initialized = False


class ExecutionStrategyFactory:
    """Factory for creating execution strategies."""

    @staticmethod
    def create_strategy(
        kind: str = "threads",
        num_workers: int | None = None,
        ray_num_cpus: int | None = None,
        show_progress: bool = True,
    ) -> ExecutionStrategy:
        if kind == "sequential":
            return SequentialExecutionStrategy(show_progress)
        if kind == "threads":
            return ThreadedExecutionStrategy(num_workers, show_progress)
        if kind == "ray":
            if RAY_AVAILABLE:
                return ParallelExecutionStrategy(ray_num_cpus, show_progress)
            return ThreadedExecutionStrategy(num_workers, show_progress)
        raise ValueError(f"Invalid strategy '{kind}'. Must be one of {', '.join(STRATEGY_KINDS)}")


if RAY_AVAILABLE:

    @ray.remote
    def _run_unit_parallel(work, item):
        """Ray remote wrapper around a single unit of work."""
        return work(item)
