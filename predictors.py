# predictors.py
import torch
import torch.nn as nn

from maze.sensors import N_INPUTS


class MazeController(nn.Module):
    '''Small MLP mapping maze sensor readings to (angular, linear) signals.

    The weights are only ever perturbed by mutation, never trained by
    gradient descent, so the module doubles as a genome.

    Args:
        input_size (int): Number of sensor inputs. Defaults to 11.
        hidden_size (int): Size of the tanh hidden layer.
        output_size (int): Number of outputs, squashed to [0, 1].
        seed (int): Optional seed for the initial weights.
    '''
    def __init__(self, input_size=N_INPUTS, hidden_size=10, output_size=2, seed=None, **_):
        super().__init__()
        if seed is not None:
            torch.manual_seed(seed)
        self.input_size = input_size
        self.output_size = output_size
        self.net = nn.Sequential(
            nn.Linear(input_size, hidden_size),
            nn.Tanh(),
            nn.Linear(hidden_size, output_size),
            nn.Sigmoid(),
        )

    def forward(self, x):
        return self.net(x)


def as_controller_fn(policy: nn.Module):
    '''Wrap a policy network as a plain sensors -> outputs function.'''
    def controller(sensors):
        with torch.no_grad():
            x = torch.as_tensor(sensors, dtype=torch.float32)
            return policy(x).tolist()
    return controller
