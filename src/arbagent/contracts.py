"""
arbagent.contracts: contract interfaces used for chain calls

Centralizes the ABI and creation bytecode of the token contract deployed by
``create_token``.  The token is a minimal ERC-20 with ``burn`` and
0 decimals; its constructor takes ``(name_, symbol_, initialSupply_)`` and
mints the whole supply to the deployer.
"""

import json

# ---------------------------------------------------------------------------
# Token contract ABI (ERC-20 subset + burn)
# ---------------------------------------------------------------------------

TOKEN_ABI_JSON = """
[
  {
    "inputs": [
      {
        "internalType": "string",
        "name": "name_",
        "type": "string"
      },
      {
        "internalType": "string",
        "name": "symbol_",
        "type": "string"
      },
      {
        "internalType": "uint256",
        "name": "initialSupply_",
        "type": "uint256"
      }
    ],
    "stateMutability": "nonpayable",
    "type": "constructor"
  },
  {
    "anonymous": false,
    "inputs": [
      {
        "indexed": true,
        "internalType": "address",
        "name": "owner",
        "type": "address"
      },
      {
        "indexed": true,
        "internalType": "address",
        "name": "spender",
        "type": "address"
      },
      {
        "indexed": false,
        "internalType": "uint256",
        "name": "value",
        "type": "uint256"
      }
    ],
    "name": "Approval",
    "type": "event"
  },
  {
    "inputs": [
      {
        "internalType": "address",
        "name": "spender",
        "type": "address"
      },
      {
        "internalType": "uint256",
        "name": "value",
        "type": "uint256"
      }
    ],
    "name": "approve",
    "outputs": [
      {
        "internalType": "bool",
        "name": "",
        "type": "bool"
      }
    ],
    "stateMutability": "nonpayable",
    "type": "function"
  },
  {
    "inputs": [
      {
        "internalType": "uint256",
        "name": "value",
        "type": "uint256"
      }
    ],
    "name": "burn",
    "outputs": [
      {
        "internalType": "bool",
        "name": "",
        "type": "bool"
      }
    ],
    "stateMutability": "nonpayable",
    "type": "function"
  },
  {
    "anonymous": false,
    "inputs": [
      {
        "indexed": true,
        "internalType": "address",
        "name": "burner",
        "type": "address"
      },
      {
        "indexed": false,
        "internalType": "uint256",
        "name": "value",
        "type": "uint256"
      }
    ],
    "name": "Burn",
    "type": "event"
  },
  {
    "inputs": [
      {
        "internalType": "address",
        "name": "to",
        "type": "address"
      },
      {
        "internalType": "uint256",
        "name": "value",
        "type": "uint256"
      }
    ],
    "name": "transfer",
    "outputs": [
      {
        "internalType": "bool",
        "name": "",
        "type": "bool"
      }
    ],
    "stateMutability": "nonpayable",
    "type": "function"
  },
  {
    "anonymous": false,
    "inputs": [
      {
        "indexed": true,
        "internalType": "address",
        "name": "from",
        "type": "address"
      },
      {
        "indexed": true,
        "internalType": "address",
        "name": "to",
        "type": "address"
      },
      {
        "indexed": false,
        "internalType": "uint256",
        "name": "value",
        "type": "uint256"
      }
    ],
    "name": "Transfer",
    "type": "event"
  },
  {
    "inputs": [
      {
        "internalType": "address",
        "name": "from",
        "type": "address"
      },
      {
        "internalType": "address",
        "name": "to",
        "type": "address"
      },
      {
        "internalType": "uint256",
        "name": "value",
        "type": "uint256"
      }
    ],
    "name": "transferFrom",
    "outputs": [
      {
        "internalType": "bool",
        "name": "",
        "type": "bool"
      }
    ],
    "stateMutability": "nonpayable",
    "type": "function"
  },
  {
    "inputs": [
      {
        "internalType": "address",
        "name": "owner",
        "type": "address"
      },
      {
        "internalType": "address",
        "name": "spender",
        "type": "address"
      }
    ],
    "name": "allowance",
    "outputs": [
      {
        "internalType": "uint256",
        "name": "",
        "type": "uint256"
      }
    ],
    "stateMutability": "view",
    "type": "function"
  },
  {
    "inputs": [
      {
        "internalType": "address",
        "name": "account",
        "type": "address"
      }
    ],
    "name": "balanceOf",
    "outputs": [
      {
        "internalType": "uint256",
        "name": "",
        "type": "uint256"
      }
    ],
    "stateMutability": "view",
    "type": "function"
  },
  {
    "inputs": [],
    "name": "decimals",
    "outputs": [
      {
        "internalType": "uint8",
        "name": "",
        "type": "uint8"
      }
    ],
    "stateMutability": "view",
    "type": "function"
  },
  {
    "inputs": [],
    "name": "name",
    "outputs": [
      {
        "internalType": "string",
        "name": "",
        "type": "string"
      }
    ],
    "stateMutability": "view",
    "type": "function"
  },
  {
    "inputs": [],
    "name": "symbol",
    "outputs": [
      {
        "internalType": "string",
        "name": "",
        "type": "string"
      }
    ],
    "stateMutability": "view",
    "type": "function"
  },
  {
    "inputs": [],
    "name": "totalSupply",
    "outputs": [
      {
        "internalType": "uint256",
        "name": "",
        "type": "uint256"
      }
    ],
    "stateMutability": "view",
    "type": "function"
  }
]
"""

TOKEN_ABI: list[dict] = json.loads(TOKEN_ABI_JSON)

# ---------------------------------------------------------------------------
# Token contract creation bytecode
# ---------------------------------------------------------------------------

TOKEN_BYTECODE = (
    "0x608060405234801561000f575f80fd5b5060405161199c38038061199c833981810160"
    "405281019061003191906102a4565b825f908161003f9190610530565b50816001908161"
    "004f9190610530565b505f60025f6101000a81548160ff021916908360ff160217905550"
    "8060038190555060035460045f3373ffffffffffffffffffffffffffffffffffffffff16"
    "73ffffffffffffffffffffffffffffffffffffffff1681526020019081526020015f2081"
    "9055503373ffffffffffffffffffffffffffffffffffffffff165f73ffffffffffffffff"
    "ffffffffffffffffffffffff167fddf252ad1be2c89b69c2b068fc378daa952ba7f163c4"
    "a11628f55a4df523b3ef600354604051610114919061060e565b60405180910390a35050"
    "50610627565b5f604051905090565b5f80fd5b5f80fd5b5f80fd5b5f80fd5b5f601f1960"
    "1f8301169050919050565b7f4e487b710000000000000000000000000000000000000000"
    "00000000000000005f52604160045260245ffd5b6101838261013d565b810181811067ff"
    "ffffffffffffff821117156101a2576101a161014d565b5b80604052505050565b5f6101"
    "b4610124565b90506101c0828261017a565b919050565b5f67ffffffffffffffff821115"
    "6101df576101de61014d565b5b6101e88261013d565b9050602081019050919050565b82"
    "81835e5f83830152505050565b5f610215610210846101c5565b6101ab565b9050828152"
    "6020810184848401111561023157610230610139565b5b61023c8482856101f5565b5093"
    "92505050565b5f82601f83011261025857610257610135565b5b81516102688482602086"
    "01610203565b91505092915050565b5f819050919050565b61028381610271565b811461"
    "028d575f80fd5b50565b5f8151905061029e8161027a565b92915050565b5f805f606084"
    "860312156102bb576102ba61012d565b5b5f84015167ffffffffffffffff8111156102d8"
    "576102d7610131565b5b6102e486828701610244565b935050602084015167ffffffffff"
    "ffffff81111561030557610304610131565b5b61031186828701610244565b9250506040"
    "61032286828701610290565b9150509250925092565b5f81519050919050565b7f4e487b"
    "71000000000000000000000000000000000000000000000000000000005f526022600452"
    "60245ffd5b5f600282049050600182168061037a57607f821691505b6020821081036103"
    "8d5761038c610336565b5b50919050565b5f819050815f5260205f209050919050565b5f"
    "6020601f8301049050919050565b5f82821b905092915050565b5f600883026103ef7fff"
    "ffffffffffffffffffffffffffffffffffffffffffffffffffffffffffffff826103b456"
    "5b6103f986836103b4565b95508019841693508086168417925050509392505050565b5f"
    "819050919050565b5f61043461042f61042a84610271565b610411565b610271565b9050"
    "919050565b5f819050919050565b61044d8361041a565b6104616104598261043b565b84"
    "84546103c0565b825550505050565b5f90565b610475610469565b610480818484610444"
    "565b505050565b5b818110156104a3576104985f8261046d565b60018101905061048656"
    "5b5050565b601f8211156104e8576104b981610393565b6104c2846103a5565b81016020"
    "8510156104d1578190505b6104e56104dd856103a5565b830182610485565b50505b5050"
    "50565b5f82821c905092915050565b5f6105085f19846008026104ed565b198083169150"
    "5092915050565b5f61052083836104f9565b9150826002028217905092915050565b6105"
    "398261032c565b67ffffffffffffffff8111156105525761055161014d565b5b61055c82"
    "54610363565b6105678282856104a7565b5f60209050601f831160018114610598575f84"
    "15610586578287015190505b6105908582610515565b8655506105f7565b601f19841661"
    "05a686610393565b5f5b828110156105cd57848901518255600182019150602085019450"
    "6020810190506105a8565b868310156105ea57848901516105e6601f8916826104f9565b"
    "8355505b6001600288020188555050505b505050505050565b61060881610271565b8252"
    "5050565b5f6020820190506106215f8301846105ff565b92915050565b61136880610634"
    "5f395ff3fe608060405234801561000f575f80fd5b506004361061009c575f3560e01c80"
    "6342966c681161006457806342966c681461015a57806370a082311461018a57806395d8"
    "9b41146101ba578063a9059cbb146101d8578063dd62ed3e146102085761009c565b8063"
    "06fdde03146100a0578063095ea7b3146100be57806318160ddd146100ee57806323b872"
    "dd1461010c578063313ce5671461013c575b5f80fd5b6100a8610238565b6040516100b5"
    "9190610d70565b60405180910390f35b6100d860048036038101906100d39190610e2156"
    "5b6102c7565b6040516100e59190610e79565b60405180910390f35b6100f6610422565b"
    "6040516101039190610ea1565b60405180910390f35b6101266004803603810190610121"
    "9190610eba565b61042b565b6040516101339190610e79565b60405180910390f35b6101"
    "446107e7565b6040516101519190610f25565b60405180910390f35b6101746004803603"
    "81019061016f9190610f3e565b6107fc565b6040516101819190610e79565b6040518091"
    "0390f35b6101a4600480360381019061019f9190610f69565b6109a4565b6040516101b1"
    "9190610ea1565b60405180910390f35b6101c26109ea565b6040516101cf9190610d7056"
    "5b60405180910390f35b6101f260048036038101906101ed9190610e21565b610a7a565b"
    "6040516101ff9190610e79565b60405180910390f35b610222600480360381019061021d"
    "9190610f94565b610c7e565b60405161022f9190610ea1565b60405180910390f35b6060"
    "5f805461024690610fff565b80601f016020809104026020016040519081016040528092"
    "919081815260200182805461027290610fff565b80156102bd5780601f10610294576101"
    "008083540402835291602001916102bd565b820191905f5260205f20905b815481529060"
    "0101906020018083116102a057829003601f168201915b5050505050905090565b5f8073"
    "ffffffffffffffffffffffffffffffffffffffff168373ffffffffffffffffffffffffff"
    "ffffffffffffff1603610336576040517f08c379a0000000000000000000000000000000"
    "00000000000000000000000000815260040161032d90611079565b60405180910390fd5b"
    "8160055f3373ffffffffffffffffffffffffffffffffffffffff1673ffffffffffffffff"
    "ffffffffffffffffffffffff1681526020019081526020015f205f8573ffffffffffffff"
    "ffffffffffffffffffffffffff1673ffffffffffffffffffffffffffffffffffffffff16"
    "81526020019081526020015f20819055508273ffffffffffffffffffffffffffffffffff"
    "ffffff163373ffffffffffffffffffffffffffffffffffffffff167f8c5be1e5ebec7d5b"
    "d14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925846040516104109190610ea1"
    "565b60405180910390a36001905092915050565b5f600354905090565b5f8073ffffffff"
    "ffffffffffffffffffffffffffffffff168473ffffffffffffffffffffffffffffffffff"
    "ffffff160361049a576040517f08c379a000000000000000000000000000000000000000"
    "0000000000000000008152600401610491906110e1565b60405180910390fd5b5f73ffff"
    "ffffffffffffffffffffffffffffffffffff168373ffffffffffffffffffffffffffffff"
    "ffffffffff1603610508576040517f08c379a00000000000000000000000000000000000"
    "000000000000000000000081526004016104ff90611149565b60405180910390fd5b8160"
    "045f8673ffffffffffffffffffffffffffffffffffffffff1673ffffffffffffffffffff"
    "ffffffffffffffffffff1681526020019081526020015f20541015610588576040517f08"
    "c379a0000000000000000000000000000000000000000000000000000000008152600401"
    "61057f906111b1565b60405180910390fd5b8160055f8673ffffffffffffffffffffffff"
    "ffffffffffffffff1673ffffffffffffffffffffffffffffffffffffffff168152602001"
    "9081526020015f205f3373ffffffffffffffffffffffffffffffffffffffff1673ffffff"
    "ffffffffffffffffffffffffffffffffff1681526020019081526020015f205410156106"
    "43576040517f08c379a00000000000000000000000000000000000000000000000000000"
    "0000815260040161063a90611219565b60405180910390fd5b8160045f8673ffffffffff"
    "ffffffffffffffffffffffffffffff1673ffffffffffffffffffffffffffffffffffffff"
    "ff1681526020019081526020015f205f82825461068f9190611264565b92505081905550"
    "8160045f8573ffffffffffffffffffffffffffffffffffffffff1673ffffffffffffffff"
    "ffffffffffffffffffffffff1681526020019081526020015f205f8282546106e2919061"
    "1297565b925050819055508160055f8673ffffffffffffffffffffffffffffffffffffff"
    "ff1673ffffffffffffffffffffffffffffffffffffffff1681526020019081526020015f"
    "205f3373ffffffffffffffffffffffffffffffffffffffff1673ffffffffffffffffffff"
    "ffffffffffffffffffff1681526020019081526020015f205f8282546107709190611264"
    "565b925050819055508273ffffffffffffffffffffffffffffffffffffffff168473ffff"
    "ffffffffffffffffffffffffffffffffffff167fddf252ad1be2c89b69c2b068fc378daa"
    "952ba7f163c4a11628f55a4df523b3ef846040516107d49190610ea1565b604051809103"
    "90a3600190509392505050565b5f60025f9054906101000a900460ff16905090565b5f81"
    "60045f3373ffffffffffffffffffffffffffffffffffffffff1673ffffffffffffffffff"
    "ffffffffffffffffffffff1681526020019081526020015f2054101561087d576040517f"
    "08c379a00000000000000000000000000000000000000000000000000000000081526004"
    "0161087490611314565b60405180910390fd5b8160045f3373ffffffffffffffffffffff"
    "ffffffffffffffffff1673ffffffffffffffffffffffffffffffffffffffff1681526020"
    "019081526020015f205f8282546108c99190611264565b925050819055508160035f8282"
    "546108e19190611264565b925050819055503373ffffffffffffffffffffffffffffffff"
    "ffffffff167fcc16f5dbb4873280815c1ee09dbd06736cffcc184412cf7a71a0fdb75d39"
    "7ca58360405161092e9190610ea1565b60405180910390a25f73ffffffffffffffffffff"
    "ffffffffffffffffffff163373ffffffffffffffffffffffffffffffffffffffff167fdd"
    "f252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef8460405161"
    "09939190610ea1565b60405180910390a360019050919050565b5f60045f8373ffffffff"
    "ffffffffffffffffffffffffffffffff1673ffffffffffffffffffffffffffffffffffff"
    "ffff1681526020019081526020015f20549050919050565b6060600180546109f990610f"
    "ff565b80601f016020809104026020016040519081016040528092919081815260200182"
    "8054610a2590610fff565b8015610a705780601f10610a47576101008083540402835291"
    "60200191610a70565b820191905f5260205f20905b815481529060010190602001808311"
    "610a5357829003601f168201915b5050505050905090565b5f8073ffffffffffffffffff"
    "ffffffffffffffffffffff168373ffffffffffffffffffffffffffffffffffffffff1603"
    "610ae9576040517f08c379a0000000000000000000000000000000000000000000000000"
    "000000008152600401610ae090611149565b60405180910390fd5b8160045f3373ffffff"
    "ffffffffffffffffffffffffffffffffff1673ffffffffffffffffffffffffffffffffff"
    "ffffff1681526020019081526020015f20541015610b69576040517f08c379a000000000"
    "0000000000000000000000000000000000000000000000008152600401610b60906111b1"
    "565b60405180910390fd5b8160045f3373ffffffffffffffffffffffffffffffffffffff"
    "ff1673ffffffffffffffffffffffffffffffffffffffff1681526020019081526020015f"
    "205f828254610bb59190611264565b925050819055508160045f8573ffffffffffffffff"
    "ffffffffffffffffffffffff1673ffffffffffffffffffffffffffffffffffffffff1681"
    "526020019081526020015f205f828254610c089190611297565b925050819055508273ff"
    "ffffffffffffffffffffffffffffffffffffff163373ffffffffffffffffffffffffffff"
    "ffffffffffff167fddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4d"
    "f523b3ef84604051610c6c9190610ea1565b60405180910390a36001905092915050565b"
    "5f60055f8473ffffffffffffffffffffffffffffffffffffffff1673ffffffffffffffff"
    "ffffffffffffffffffffffff1681526020019081526020015f205f8373ffffffffffffff"
    "ffffffffffffffffffffffffff1673ffffffffffffffffffffffffffffffffffffffff16"
    "81526020019081526020015f2054905092915050565b5f81519050919050565b5f828252"
    "60208201905092915050565b8281835e5f83830152505050565b5f601f19601f83011690"
    "50919050565b5f610d4282610d00565b610d4c8185610d0a565b9350610d5c8185602086"
    "01610d1a565b610d6581610d28565b840191505092915050565b5f602082019050818103"
    "5f830152610d888184610d38565b905092915050565b5f80fd5b5f73ffffffffffffffff"
    "ffffffffffffffffffffffff82169050919050565b5f610dbd82610d94565b9050919050"
    "565b610dcd81610db3565b8114610dd7575f80fd5b50565b5f81359050610de881610dc4"
    "565b92915050565b5f819050919050565b610e0081610dee565b8114610e0a575f80fd5b"
    "50565b5f81359050610e1b81610df7565b92915050565b5f8060408385031215610e3757"
    "610e36610d90565b5b5f610e4485828601610dda565b9250506020610e5585828601610e"
    "0d565b9150509250929050565b5f8115159050919050565b610e7381610e5f565b825250"
    "50565b5f602082019050610e8c5f830184610e6a565b92915050565b610e9b81610dee56"
    "5b82525050565b5f602082019050610eb45f830184610e92565b92915050565b5f805f60"
    "608486031215610ed157610ed0610d90565b5b5f610ede86828701610dda565b93505060"
    "20610eef86828701610dda565b9250506040610f0086828701610e0d565b915050925092"
    "5092565b5f60ff82169050919050565b610f1f81610f0a565b82525050565b5f60208201"
    "9050610f385f830184610f16565b92915050565b5f60208284031215610f5357610f5261"
    "0d90565b5b5f610f6084828501610e0d565b91505092915050565b5f6020828403121561"
    "0f7e57610f7d610d90565b5b5f610f8b84828501610dda565b91505092915050565b5f80"
    "60408385031215610faa57610fa9610d90565b5b5f610fb785828601610dda565b925050"
    "6020610fc885828601610dda565b9150509250929050565b7f4e487b7100000000000000"
    "0000000000000000000000000000000000000000005f52602260045260245ffd5b5f6002"
    "82049050600182168061101657607f821691505b60208210810361102957611028610fd2"
    "565b5b50919050565b7f496e76616c6964207370656e6465722061646472657373000000"
    "0000000000005f82015250565b5f611063601783610d0a565b915061106e8261102f565b"
    "602082019050919050565b5f6020820190508181035f83015261109081611057565b9050"
    "919050565b7f496e76616c69642073656e64657220616464726573730000000000000000"
    "00005f82015250565b5f6110cb601683610d0a565b91506110d682611097565b60208201"
    "9050919050565b5f6020820190508181035f8301526110f8816110bf565b905091905056"
    "5b7f496e76616c696420726563697069656e742061646472657373000000000000005f82"
    "015250565b5f611133601983610d0a565b915061113e826110ff565b6020820190509190"
    "50565b5f6020820190508181035f83015261116081611127565b9050919050565b7f496e"
    "73756666696369656e742062616c616e63650000000000000000000000005f8201525056"
    "5b5f61119b601483610d0a565b91506111a682611167565b602082019050919050565b5f"
    "6020820190508181035f8301526111c88161118f565b9050919050565b7f496e73756666"
    "696369656e7420616c6c6f77616e6365000000000000000000005f82015250565b5f6112"
    "03601683610d0a565b915061120e826111cf565b602082019050919050565b5f60208201"
    "90508181035f830152611230816111f7565b9050919050565b7f4e487b71000000000000"
    "000000000000000000000000000000000000000000005f52601160045260245ffd5b5f61"
    "126e82610dee565b915061127983610dee565b9250828203905081811115611291576112"
    "90611237565b5b92915050565b5f6112a182610dee565b91506112ac83610dee565b9250"
    "8282019050808211156112c4576112c3611237565b5b92915050565b7f496e7375666669"
    "6369656e742062616c616e636520746f206275726e000000005f82015250565b5f6112fe"
    "601c83610d0a565b9150611309826112ca565b602082019050919050565b5f6020820190"
    "508181035f83015261132b816112f2565b905091905056fea2646970667358221220fb94"
    "0003040f153c2377b7b4e01cba82ec8c14120f8c7aff05bd60e539f5ecf064736f6c6343"
    "00081a0033"
)
