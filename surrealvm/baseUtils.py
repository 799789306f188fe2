import logging
import typing as t

from surrealvm.logging import ProgressBar

logger = logging.getLogger(__name__)


if t.TYPE_CHECKING:
    import _typeshed as _ts


T = t.TypeVar("T")


def partition(predicate: t.Callable[[T], bool], iterable: t.Iterable[T]):
    """Partition a list based on the results of a :param:`predicate`."""
    trues: t.List[T] = []
    falses: t.List[T] = []
    for item in iterable:
        if predicate(item):
            trues.append(item)
        else:
            falses.append(item)
    return trues, falses


def read_with_progress(
    input: "_ts.SupportsRead[t.AnyStr]",
    output: "_ts.SupportsWrite[t.AnyStr]",
    size=0,
    blocksize=4096,
    label: t.Optional[str] = "",
):
    with ProgressBar(
        total=size or None,
        desc=label,
        leave=False,
        unit_scale=True,
        unit="b",
        delay=0.4,
    ) as bar:
        while True:
            buf = input.read(blocksize)
            if not buf:
                break
            output.write(buf)
            bar.update(len(buf))
