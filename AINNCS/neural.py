import numpy as np
import torch
import torch.nn as nn
from scipy.io import loadmat
from pathlib import Path
from collections import defaultdict
from auto_LiRPA import BoundedModule, BoundedTensor, PerturbationLpNorm
from AINNCS.control import Control, NoPostprocessing
from AINNCS.interval import d_positive
from AINNCS.logger import Logger

logger = Logger.setup_logger(__name__)

_activations = {
    'relu'    : nn.ReLU,
    'poslin'  : nn.ReLU,
    'sigmoid' : nn.Sigmoid,
    'logsig'  : nn.Sigmoid,
    'tanh'    : nn.Tanh,
    'tansig'  : nn.Tanh,
}
_linear = ('linear', 'purelin', 'affine', 'id', 'identity', '')

def _activation (act) :
    a = str(act).strip().lower()
    if a in _linear :
        return None
    if a not in _activations :
        raise ValueError(f'Unknown activation function {act!r}')
    return _activations[a]()

class NeuralNetwork (nn.Module) :
    def __init__(self, Ws, bs, acts, name=None, device='cpu') :
        super().__init__()
        if not (len(Ws) == len(bs) == len(acts)) :
            raise ValueError(f'Got {len(Ws)} weights, {len(bs)} biases and {len(acts)} activations')

        self.name = name
        self.mods = []
        for W, b, act in zip(Ws, bs, acts) :
            b = np.atleast_1d(np.asarray(b, dtype=np.float32))
            W = np.asarray(W, dtype=np.float32).reshape(len(b), -1)
            layer = nn.Linear(W.shape[1], W.shape[0])
            layer.weight = nn.Parameter(torch.tensor(W))
            layer.bias = nn.Parameter(torch.tensor(b))
            self.mods.append(layer)
            act_mod = _activation(act)
            if act_mod is not None :
                self.mods.append(act_mod)

        self.seq = nn.Sequential(*self.mods)
        self.device = device
        self.to(self.device)

    @classmethod
    def from_mat (cls, path, act_key='act_fcns', device='cpu') :
        """Read a controller from a .mat file with cells W, b and act_key."""
        path = Path(path)
        mat = loadmat(str(path), squeeze_me=True)
        matW, matb = mat['W'], mat['b']
        # A single layer is squeezed to a plain array instead of a cell
        if matW.dtype != object :
            matW, matb = [matW], [matb]
        matacts = np.atleast_1d(mat[act_key])
        logger.info(f'Read {len(matW)} layers from {path}')
        return cls(list(matW), list(matb), [str(a) for a in matacts], path.name, device)

    @classmethod
    def from_nnet (cls, path, device='cpu') :
        """Read a ReLU network in .nnet format, input normalization folded into the first layer."""
        path = Path(path)
        with open(path) as f :
            lines = [l.strip() for l in f if l.strip() and not l.startswith('//')]
        rows = [[float(v) for v in l.split(',') if v.strip() != ''] for l in lines]
        num_layers, in_len, out_len, _ = [int(v) for v in rows[0][:4]]
        sizes = [int(v) for v in rows[1]]
        # rows[3] and rows[4] hold the input ranges seen in training
        means, ranges = np.array(rows[5]), np.array(rows[6])
        idx = 7
        Ws, bs = [], []
        for k in range(num_layers) :
            W = np.array(rows[idx:idx+sizes[k+1]]); idx += sizes[k+1]
            b = np.array(rows[idx:idx+sizes[k+1]]).reshape(-1); idx += sizes[k+1]
            Ws.append(W); bs.append(b)

        # x_n = (x - mean)/range on inputs
        Ws[0] = Ws[0] / ranges[:in_len]
        bs[0] = bs[0] - Ws[0] @ means[:in_len]
        # y = y_n*range + mean on outputs
        Ws[-1] = Ws[-1] * ranges[-1]
        bs[-1] = bs[-1] * ranges[-1] + means[-1]
        acts = ['relu']*(num_layers - 1) + ['linear']
        net = cls(Ws, bs, acts, path.name, device)
        logger.info(f'Read {num_layers} layers ({in_len} -> {out_len}) from {path}')
        return net

    def insert_preprocessing (self, M, c=None) :
        """Feed M x + c to the network instead of x."""
        M = np.atleast_2d(np.asarray(M, dtype=np.float32))
        g_lin = nn.Linear(M.shape[1], M.shape[0], bias=(c is not None))
        g_lin.weight = nn.Parameter(torch.tensor(M))
        if c is not None :
            g_lin.bias = nn.Parameter(torch.tensor(np.asarray(c, dtype=np.float32).reshape(-1)))
        self.seq.insert(0, g_lin)
        self.to(self.device)

    @property
    def in_len (self) :
        return self.seq[0].in_features

    @property
    def out_len (self) :
        return [m for m in self.seq if isinstance(m, nn.Linear)][-1].out_features

    def forward(self, x) :
        return self.seq(x)

    def __str__ (self) :
        return f'neural network {self.name}, {str(self.seq)}'

class NeuralNetworkControl (Control) :
    def __init__(self, nn, postprocessing=NoPostprocessing(), method='CROWN', bound_opts=None,
                 device='cpu', uclip=(-np.inf, np.inf), verbose=False) :
        super().__init__(u_len=nn.out_len)
        self.x_len = nn.in_len
        self.nn = nn
        self.postprocessing = postprocessing
        self.global_input = torch.zeros([1,self.x_len], dtype=torch.float32)
        self.bnn = BoundedModule(nn, self.global_input, bound_opts=bound_opts, device=device, verbose=verbose)
        self.method = method
        self.device = device
        self.required_A = defaultdict(set)
        self.required_A[self.bnn.output_name[0]].add(self.bnn.input_name[0])
        self._C = None
        self.C_ = None
        self._Cp = None
        self._Cn = None
        self.C_p = None
        self.C_n = None
        self._d = None
        self.d_ = None
        self._uclip, self.u_clip = uclip

    def y (self, x) :
        xin = torch.tensor(np.asarray(x, dtype=np.float32).reshape(1,-1), device=self.device)
        with torch.no_grad() :
            return self.nn(xin).cpu().numpy().reshape(-1).astype(float)

    def u (self, t, x) :
        u = self.postprocessing(self.y(x))
        return np.clip(u, self._uclip, self.u_clip)

    def _y_bounds (self, _x, x_) :
        _y = self._Cp @ _x + self._Cn @ x_ + self._d
        y_ = self.C_p @ x_ + self.C_n @ _x + self.d_
        return _y, y_

    def _u (self, t, _x, x_) :
        _u, u_ = self.postprocessing.bounds(*self._y_bounds(_x, x_))
        return np.clip(_u, self._uclip, self.u_clip)

    def u_ (self, t, _x, x_) :
        _u, u_ = self.postprocessing.bounds(*self._y_bounds(_x, x_))
        return np.clip(u_, self._uclip, self.u_clip)

    def step_if (self, t, _x, x_) :
        _u, u_ = self.postprocessing.bounds(*self._y_bounds(_x, x_))
        self._uCALC = np.clip(_u, self._uclip, self.u_clip)
        self.u_CALC = np.clip(u_, self._uclip, self.u_clip)
        return self._uCALC, self.u_CALC

    # Linear bounds _C x + _d <= nn(x) <= C_ x + d_ valid on [_x, x_]
    def prime (self, _x, x_) :
        x_L = torch.tensor(np.asarray(_x, dtype=np.float32).reshape(1,-1), device=self.device)
        x_U = torch.tensor(np.asarray(x_, dtype=np.float32).reshape(1,-1), device=self.device)
        ptb = PerturbationLpNorm(norm=np.inf, x_L=x_L, x_U=x_U)
        input = BoundedTensor(self.global_input, ptb)
        _, _, A_dict = self.bnn.compute_bounds(x=(input,), method=self.method,
                                               return_A=True, needed_A_dict=self.required_A)
        A = A_dict[self.bnn.output_name[0]][self.bnn.input_name[0]]

        self._C = A['lA'].cpu().detach().numpy().reshape(self.u_len,-1).astype(float)
        self.C_ = A['uA'].cpu().detach().numpy().reshape(self.u_len,-1).astype(float)
        self._Cp, self._Cn = d_positive(self._C)
        self.C_p, self.C_n = d_positive(self.C_)
        self._d = A['lbias'].cpu().detach().numpy().reshape(-1).astype(float)
        self.d_ = A['ubias'].cpu().detach().numpy().reshape(-1).astype(float)

    def __str__(self) -> str:
        return f'{str(self.nn)}, postprocessing {self.postprocessing}'
