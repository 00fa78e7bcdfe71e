"""Register allocation for MIPS code generation."""


class AllocationError(Exception):
    """Raised when the live-value stack or the register bank is misused."""
    pass


class RegisterAllocator:
    """Hands out scratch registers and tracks live values.

    Register allocation strategy for MIPS:

    Temporary registers ($t0-$t9):
    - Every expression leaf (integer, string, identifier) gets a fresh
      temporary holding its value
    - Arithmetic reuses the right-hand register as the destination
    - Values waiting to be consumed by a parent node live on a LIFO
      "live-value" stack

    Two modes:
    1. Unbounded (default): names are issued $t0, $t1, $t2, ... and never
       reused within a run. There is no upper bound, so deep programs get
       names past $t9 that the target does not have.
    2. Reuse: consumed registers go back to a free pool and acquire() picks
       the lowest free one from the ten-register bank. Running out of
       registers is an error (there is no spilling).
    """

    def __init__(self, prefix="$t", reuse=False, bank_size=10):
        self.prefix = prefix
        self.reuse = reuse
        self.bank = [f"{prefix}{i}" for i in range(bank_size)]

        # Next suffix to issue in unbounded mode
        self.next_id = 0

        # First register handed out in this run
        self.first_issued = None

        # Registers handed out and not yet released (reuse mode)
        self.in_use = set()

        # Live-value stack: registers holding results not yet consumed
        self.stack = []

    def acquire(self):
        """Return a register for a new value."""
        reg = self._next_register()
        if self.first_issued is None:
            self.first_issued = reg
        return reg

    def _next_register(self):
        if not self.reuse:
            reg = f"{self.prefix}{self.next_id}"
            self.next_id += 1
            return reg

        for reg in self.bank:
            if reg not in self.in_use:
                self.in_use.add(reg)
                return reg
        raise AllocationError(
            f"all {len(self.bank)} scratch registers are live; "
            f"expression too deep for reuse mode")

    acquire_register = acquire

    def release(self, register):
        """Free a register whose value has been consumed."""
        if self.reuse:
            self.in_use.discard(register)

    def push(self, register):
        self.stack.append(register)

    def pop(self):
        if not self.stack:
            raise AllocationError("pop from empty live-value stack")
        return self.stack.pop()

    def peek(self):
        if not self.stack:
            raise AllocationError("peek at empty live-value stack")
        return self.stack[-1]

    @property
    def depth(self):
        return len(self.stack)

    def __len__(self):
        return len(self.stack)

    def live_values(self):
        """Snapshot of the live-value stack, bottom first."""
        return list(self.stack)

    def reset(self):
        """Reset all allocations (for a new run)."""
        self.next_id = 0
        self.first_issued = None
        self.in_use.clear()
        self.stack.clear()

    def get_allocation_summary(self):
        """Get human-readable summary of current allocations (for debugging)."""
        summary = {
            'mode': 'reuse' if self.reuse else 'unbounded',
            'live': self.stack.copy(),
        }
        if self.reuse:
            summary['in_use'] = sorted(self.in_use, key=self.bank.index)
            summary['available'] = [r for r in self.bank if r not in self.in_use]
        else:
            summary['issued'] = self.next_id
        return summary
