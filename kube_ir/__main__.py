import sys

from kube_ir.cli import main

raise SystemExit(main(sys.argv[1:]))
