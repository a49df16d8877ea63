import argparse
import logging
import os
import sys

from .challenges import CHALLENGES, run_challenges

def parse_args(*args):
    argp = argparse.ArgumentParser(prog='symcrack', description='Run the cryptopals set 1 and 2 challenges.')
    argp.add_argument('challenges', nargs='*', type=int, metavar='N',
                      help='challenge numbers to run (default: all of %s)' % ', '.join(str(c.number) for c in CHALLENGES))
    argp.add_argument('--data-dir', '-d', default=os.environ.get('SYMCRACK_DATA', '.'),
                      help='directory holding the challenge data files (default: $SYMCRACK_DATA or .)')
    argp.add_argument('--verbose', '-v', action='count', default=0,
                      help='-v for info logging, -vv for debug')
    args = argp.parse_args(*args)
    unknown = set(args.challenges) - set(c.number for c in CHALLENGES)
    if unknown:
        argp.error('no such challenge: %s' % ', '.join(map(str, sorted(unknown))))
    return args

# configure log level based on verbose argument
def setup_logging(verbose=0):
    logging.basicConfig(format='%(levelname)s %(name)s: %(message)s')
    if verbose >= 2:
        logging.root.setLevel(logging.DEBUG)
    elif verbose == 1:
        logging.root.setLevel(logging.INFO)

def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)
    logging.info('data directory %s', args.data_dir)
    return 1 if run_challenges(args.challenges, args.data_dir) else 0

if __name__ == '__main__':
    sys.exit(main())
