from rich.pretty import pprint

from argpool import *

__prog__ = "copy"

pool = (
    PoolBuilder()
    .argument(source := Argument(metavar="SOURCE"))
    .vararg(targets := Argument(optional=True, metavar="TARGET"))
    .option(force := Option("force", "f", type=BOOLEAN, default=False, marker=True))
    .option(level := Option("level", "l", type=INT, default=1))
    .build()
)


if __name__ == '__main__':
    results = OptionParser(pool, shell=True).parse()
    pprint(results)
    pprint({
        "source": results.get(source),
        "targets": results.get_vararg_values(targets),
        "force": results.get_or_default(force),
        "level": results.get_or_default(level),
    })
