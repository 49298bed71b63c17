class LRScheduler:
    """
    Linear warmup from ``min_lr`` to ``max_lr``, linear anneal back to ``min_lr``,
    then a short final dip (10% of the anneal budget) down to ``final_lr``.
    """

    def __init__(self, warmup_steps: int, total_steps: int, min_lr: float, max_lr: float, final_lr: float):
        if total_steps <= warmup_steps:
            raise ValueError(f"total_steps ({total_steps}) must exceed warmup_steps ({warmup_steps})")
        self.warmup_steps = warmup_steps
        self.total_steps = total_steps

        self.min_lr = min_lr
        self.max_lr = max_lr
        self.final_lr = final_lr

        self.anneal_steps = self.total_steps - self.warmup_steps
        self.final_dip_steps = max(1, int(self.anneal_steps * 0.1))
        self.anneal_steps -= self.final_dip_steps

    def __call__(self, step: int):
        if step >= self.total_steps:
            return self.final_lr
        if step < self.warmup_steps:
            return self.min_lr + (self.max_lr - self.min_lr) * (step / self.warmup_steps)

        step -= self.warmup_steps
        if step < self.anneal_steps:
            return self.max_lr - (self.max_lr - self.min_lr) * (step / self.anneal_steps)

        step -= self.anneal_steps
        return self.min_lr - (self.min_lr - self.final_lr) * (step / self.final_dip_steps)

    def plot(self, path=None):
        import matplotlib.pyplot as plt

        steps = list(range(self.total_steps))
        lrs = [self(step) for step in steps]

        fig, ax = plt.subplots()
        ax.plot(steps, lrs)
        ax.set_title("Learning Rate Schedule")
        ax.set_xlabel("Step")
        ax.set_ylabel("Learning Rate")
        ax.grid(True)
        if path is not None:
            fig.savefig(path)
            plt.close(fig)
        return fig
