"""jobsh — a small command interpreter with background job supervision.

The interpreter reads a line, splits it on spaces, peels off ``<`` and
``>`` redirections, and runs the program in a forked child.  A trailing
``&`` detaches the child into the job table, which is swept for
finished processes before every new line.
"""
